from iiptiles.url import Url


def test_plus_becomes_space():
    assert Url("a+b+c").decode() == "a b c"


def test_hex_escape_decoded():
    assert Url("%41b%2f").decode() == "Ab/"


def test_multibyte_escape_round_trip():
    assert Url("caf%C3%A9").decode() == "caf\u00e9"


def test_null_byte_removed_with_warning():
    url = Url("image%00.tif")
    assert url.decode() == "image.tif"
    assert "NULL" in url.warning
    assert "image%00.tif" in url.warning


def test_no_warning_for_clean_url():
    url = Url("image.tif")
    assert url.decode() == "image.tif"
    assert url.warning == ""


def test_malformed_percent_passed_through():
    assert Url("50%").decode() == "50%"
    assert Url("%zz").decode() == "%zz"
    assert Url("%4").decode() == "%4"


def test_escape_quotes_and_backslashes():
    assert Url('say%22hi%22').escape() == 'say\\"hi\\"'
    assert Url("a%5Cb").escape() == "a\\\\b"