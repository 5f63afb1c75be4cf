"""Unit tests for account helpers."""

from wellness.services.account.account_service import merge_preferences


class TestMergePreferences:

    def test_nested_dicts_merge_key_by_key(self) -> None:
        current = {"theme": "light", "notifications": {"email": True, "push": True}}

        merged = merge_preferences(current, {"notifications": {"push": False}})

        assert merged == {"theme": "light", "notifications": {"email": True, "push": False}}

    def test_scalars_replaced(self) -> None:
        assert merge_preferences({"theme": "light"}, {"theme": "dark"}) == {"theme": "dark"}

    def test_none_values_ignored(self) -> None:
        assert merge_preferences({"language": "en"}, {"language": None}) == {"language": "en"}

    def test_missing_current(self) -> None:
        assert merge_preferences(None, {"timezone": "UTC"}) == {"timezone": "UTC"}

    def test_input_not_mutated(self) -> None:
        current = {"privacy": {"share_data": False}}

        merge_preferences(current, {"privacy": {"share_data": True}})

        assert current == {"privacy": {"share_data": False}}
