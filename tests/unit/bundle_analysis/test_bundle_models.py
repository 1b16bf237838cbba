import dataclasses

import pytest

from nextbundle.bundle_analysis import GlobalChange, Options, PageChange


def test_options_defaults():
    options = Options()
    assert options.name == "app"
    assert options.budget is None
    assert options.budget_percent_increase_red == 20.0
    assert options.minimum_change_threshold is None
    assert options.show_details is True
    assert options.build_output_directory == ".next"
    assert options.skip_comment_if_empty is False
    assert options.show_removed_pages is False


def test_options_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        Options().budget = 10


def test_options_from_dict_ignores_unknown_keys():
    assert Options.from_dict({"name": "web", "budget": 100, "other": True}) == Options(
        name="web", budget=100
    )


@pytest.mark.parametrize(
    "gzip_diff, increase",
    [(None, False), (0, False), (-1, False), (1, True)],
)
def test_change_increase(gzip_diff, increase):
    change = PageChange(
        page="/",
        change_type=PageChange.ChangeType.CHANGED,
        raw=1,
        gzip=1,
        gzip_diff=gzip_diff,
    )
    assert change.increase is increase


def test_global_change_page_name():
    change = GlobalChange(
        change_type=GlobalChange.ChangeType.CHANGED, raw=1, gzip=1, gzip_diff=1
    )
    assert change.page == "global"
