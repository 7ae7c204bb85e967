import pytest

from invoice_console.services.number_words import (
    OutOfRangeError,
    amount_in_words,
    number_to_words,
)


@pytest.mark.parametrize(
    "amount, words",
    [
        (0, ""),
        (7, "Seven "),
        (19, "Nineteen "),
        (20, "Twenty "),
        (45, "Forty Five "),
        (100, "One Hundred "),
        (236, "Two Hundred and Thirty Six "),
        (1005, "One Thousand and Five "),
        (100000, "One Lakh "),
        (150000, "One Lakh Fifty Thousand "),
        (10000000, "One Crore "),
        (123456789, "Twelve Crore Thirty Four Lakh Fifty Six Thousand Seven Hundred and Eighty Nine "),
        (999999999, "Ninety Nine Crore Ninety Nine Lakh Ninety Nine Thousand Nine Hundred and Ninety Nine "),
    ],
)
def test_number_to_words(amount, words):
    assert number_to_words(amount) == words


def test_and_follows_any_higher_group():
    # Hundred group is zero but the lakh group was emitted.
    assert number_to_words(1500050) == "Fifteen Lakh and Fifty "


@pytest.mark.parametrize("amount", [1_000_000_000, -1])
def test_out_of_range(amount):
    with pytest.raises(OutOfRangeError):
        number_to_words(amount)


def test_out_of_range_is_value_error():
    assert issubclass(OutOfRangeError, ValueError)


@pytest.mark.parametrize(
    "total, words",
    [
        ("236", "Two Hundred and Thirty Six Rupees Only"),
        ("235.5", "Two Hundred and Thirty Six Rupees Only"),
        ("235.49", "Two Hundred and Thirty Five Rupees Only"),
        ("0", "Zero Rupees Only"),
    ],
)
def test_amount_in_words(total, words):
    assert amount_in_words(total) == words


@pytest.mark.parametrize(
    "total, words",
    [
        ("999999999.5", "1,00,00,00,000.00 Rupees Only"),
        ("1500000000", "1,50,00,00,000.00 Rupees Only"),
        ("-50", "-50.00 Rupees Only"),
    ],
)
def test_amount_in_words_out_of_range_uses_figures(total, words):
    assert amount_in_words(total) == words
