from chefbook.core.config import get_settings
from chefbook.utils.pagination import PageWindow, page_window
from chefbook.utils.validators import MAX_ID


def test_page_window_offset_and_limit():
    window = PageWindow(current=3, page_size=4)
    assert window.offset == 8
    assert window.limit == 4
    assert PageWindow().offset == 0


def test_page_window_defaults_and_cap():
    settings = get_settings()
    default = page_window()
    assert default.current == 1
    assert default.page_size == settings.default_page_size

    capped = page_window(1, settings.max_page_size + 50)
    assert capped.page_size == settings.max_page_size

    assert page_window(0, 0).current == 1
    assert page_window(0, 0).page_size == 1


def test_page_window_keeps_offset_in_integer_range():
    window = page_window(2**70, 10)
    assert window.offset <= MAX_ID
    assert window.current == MAX_ID // 10
