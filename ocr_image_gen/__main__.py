import fire

from ocr_image_gen.run_generate import run


def main():
    """The main entry point for the command-line interface.

    This function exposes `ocr_image_gen.run_generate.run` on the command line
    with `fire`, so every argument of `run` becomes a command-line flag.
    """
    fire.Fire(run)


if __name__ == "__main__":
    main()
