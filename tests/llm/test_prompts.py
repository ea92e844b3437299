import pytest

from llm.prompts.loader import PromptManager
from models.category import DEFAULT_CATEGORY_NAMES


class TestPromptManager:
    """Tests for PromptManager."""

    def test_render_statement_extraction(self):
        manager = PromptManager()

        rendered = manager.render_prompt(
            "statement_extraction", {"categories": ", ".join(DEFAULT_CATEGORY_NAMES)}
        )

        assert "Market, Restoran" in rendered["system_prompt"]
        assert '"card_info": {"bank"' in rendered["system_prompt"]
        assert "{categories}" not in rendered["system_prompt"]
        assert rendered["parameters"]["model"] == "gpt-4o-mini"
        assert rendered["version"] == "1.0"

    def test_caches_loaded_prompts(self):
        manager = PromptManager()

        assert manager.load_prompt("statement_extraction") is manager.load_prompt(
            "statement_extraction"
        )

    def test_missing_prompt_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PromptManager(tmp_path).load_prompt("nope")

    def test_missing_required_key(self, tmp_path):
        (tmp_path / "broken.yaml").write_text("system_prompt: hi\n", encoding="utf-8")

        with pytest.raises(ValueError, match="user_prompt_template"):
            PromptManager(tmp_path).load_prompt("broken")

    def test_render_insights(self):
        manager = PromptManager()

        rendered = manager.render_prompt(
            "insights", {"max_insights": 5, "transactions": '[{"merchant": "Migros"}]'}
        )

        assert '"insights": [' in rendered["system_prompt"]
        assert "En fazla 5 içgörü sun." in rendered["system_prompt"]
        assert rendered["user_prompt"] == 'Son harcamalar:\n[{"merchant": "Migros"}]\n'
