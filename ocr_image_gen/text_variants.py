"""Stochastic mutations of the rendered text.

These helpers change the text content rather than its visual style, so they
are plain functions applied to the sentence before markup assembly and are
toggled independently through their probabilities.
"""

import numpy as np


def random_numerals(digits, length):
    """Builds a random string of `length` characters drawn from `digits`."""
    return "".join(np.random.choice(list(digits), length))


def maybe_numerals(sentence, probability, digits, length_range=(4, 14)):
    """Replaces the sentence with a random numeral string with the given probability.

    Args:
        sentence (str): The source sentence.
        probability (float): The chance of substituting numerals.
        digits (str): The digit characters to draw from.
        length_range (tuple[int, int]): Inclusive bounds of the numeral length.

    Returns:
        str: Either the untouched sentence or a numeral string.
    """
    if np.random.rand() >= probability:
        return sentence
    length = np.random.randint(length_range[0], length_range[1] + 1)
    return random_numerals(digits, length)


def inject_noise_characters(text, probability, characters):
    """Inserts 1-3 random punctuation or diacritic characters into the text.

    Insertion points are drawn uniformly over the positions of the growing
    string, including both ends.
    """
    if not characters or np.random.rand() >= probability:
        return text
    for _ in range(np.random.randint(1, 4)):
        position = np.random.randint(0, len(text) + 1)
        text = text[:position] + np.random.choice(list(characters)) + text[position:]
    return text
