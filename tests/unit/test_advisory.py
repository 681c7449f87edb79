"""Tests for the advisory pipelines: prompts, translation walkers, flow."""

import pytest
from unittest.mock import AsyncMock, patch

from agriadvisor.core.types import FarmProfile
from agriadvisor.pipeline.advisory import (
    IMAGE_PROMPT_CHARS,
    REPORT_TITLE,
    build_advisory_prompt,
    build_crop_plan_prompt,
    build_disease_prompt,
    diagnose_disease,
    generate_advisory_report,
    generate_crop_plan,
    translate_crop_plan,
    translate_leaves,
    wants_translation,
)


def _profile(**overrides) -> FarmProfile:
    fields = dict(
        location="Guntur",
        land_size="5 acres",
        land_type="Black soil",
        season="Kharif",
        water_facility="Borewell",
        duration="3-4 months",
        land_health="Low nitrogen",
    )
    fields.update(overrides)
    return FarmProfile(**fields)


async def _tag_translation(text, target, source="en", api_key=None):
    return f"[{target}]{text}"


class TestPrompts:
    def test_advisory_prompt_includes_profile(self):
        prompt = build_advisory_prompt(_profile())
        for value in ("Guntur", "5 acres", "Black soil", "Low nitrogen", "Borewell", "3-4 months"):
            assert value in prompt

    def test_crop_plan_prompt_without_details(self):
        prompt = build_crop_plan_prompt("Rice")
        assert "Rice" in prompt
        assert "Farm Details" not in prompt

    def test_crop_plan_prompt_with_some_details(self):
        prompt = build_crop_plan_prompt("Rice", location="Guntur", season="Rabi")
        assert "- Location: Guntur" in prompt
        assert "- Season: Rabi" in prompt
        assert "Soil Type" not in prompt

    def test_disease_prompt_defaults_crop_type(self):
        assert "Unknown" in build_disease_prompt("abc")

    def test_disease_prompt_truncates_payload(self):
        payload = "A" * IMAGE_PROMPT_CHARS + "B" * 500
        prompt = build_disease_prompt(payload, "Tomato")
        assert "A" * IMAGE_PROMPT_CHARS in prompt
        assert "AB" not in prompt
        assert "Tomato" in prompt


class TestWantsTranslation:
    @pytest.mark.parametrize("language,expected", [
        (None, False), ("", False), ("en", False), ("hi", True), ("te", True),
    ])
    def test_language_codes(self, language, expected):
        assert wants_translation(language) is expected


class TestTranslationWalkers:
    async def test_translate_leaves_walks_nested_values(self):
        value = {"a": "x", "b": ["y", 3, {"c": "z"}], "d": None}

        with patch("agriadvisor.pipeline.advisory.translate_text", side_effect=_tag_translation):
            result = await translate_leaves(value, "hi", None)

        assert result == {"a": "[hi]x", "b": ["[hi]y", 3, {"c": "[hi]z"}], "d": None}

    async def test_crop_plan_fields_translated_in_place(self):
        plan = {
            "cropName": "Rice",
            "totalDuration": "120 days",
            "phases": [{
                "phaseName": "Nursery",
                "weekRange": "Week 1-3",
                "tasks": [{"task": "Sow", "description": "Sow seeds", "importance": "High"}],
                "milestones": ["Germination"],
            }],
            "generalTips": ["Keep fields flooded"],
            "warnings": ["Watch for blast"],
        }

        with patch("agriadvisor.pipeline.advisory.translate_text", side_effect=_tag_translation):
            result = await translate_crop_plan(plan, "te", "k")

        assert result is plan
        assert plan["cropName"] == "Rice"
        assert plan["totalDuration"] == "120 days"
        phase = plan["phases"][0]
        assert phase["phaseName"] == "[te]Nursery"
        assert phase["weekRange"] == "[te]Week 1-3"
        assert phase["tasks"][0] == {
            "task": "[te]Sow", "description": "[te]Sow seeds", "importance": "[te]High",
        }
        assert phase["milestones"] == ["[te]Germination"]
        assert plan["generalTips"] == ["[te]Keep fields flooded"]
        assert plan["warnings"] == ["[te]Watch for blast"]

    async def test_crop_plan_missing_sections_tolerated(self):
        plan = {"cropName": "Maize", "phases": [{"phaseName": "Sowing"}, "junk"]}

        with patch("agriadvisor.pipeline.advisory.translate_text", side_effect=_tag_translation) as mock_t:
            await translate_crop_plan(plan, "hi", None)

        assert plan["phases"][0]["phaseName"] == "[hi]Sowing"
        assert mock_t.await_count == 1


class TestGenerateAdvisoryReport:
    async def test_english_skips_translation(self):
        with patch("agriadvisor.pipeline.advisory.generate", AsyncMock(return_value="advice")), \
             patch("agriadvisor.pipeline.advisory.translate_text") as mock_t:
            title, result = await generate_advisory_report(_profile())

        assert (title, result) == (REPORT_TITLE, "advice")
        mock_t.assert_not_called()

    async def test_translates_text_and_title(self):
        with patch("agriadvisor.pipeline.advisory.generate", AsyncMock(return_value="advice")), \
             patch("agriadvisor.pipeline.advisory.translate_text", side_effect=_tag_translation) as mock_t:
            title, result = await generate_advisory_report(_profile(language="hi"), api_key="k")

        assert result == "[hi]advice"
        assert title == f"[hi]{REPORT_TITLE}"
        assert mock_t.await_count == 2

    async def test_generation_failure_propagates(self):
        from agriadvisor.core.errors import UpstreamError

        with patch(
            "agriadvisor.pipeline.advisory.generate",
            AsyncMock(side_effect=UpstreamError("Gemini API error: quota")),
        ), patch("agriadvisor.pipeline.advisory.translate_text") as mock_t:
            with pytest.raises(UpstreamError, match="quota"):
                await generate_advisory_report(_profile(language="hi"))

        mock_t.assert_not_called()


class TestGenerateCropPlan:
    async def test_non_json_plan_returned_untranslated(self):
        with patch("agriadvisor.pipeline.advisory.generate", AsyncMock(return_value="plain text plan")), \
             patch("agriadvisor.pipeline.advisory.translate_text") as mock_t:
            result = await generate_crop_plan("Rice", language="hi")

        assert result == "plain text plan"
        mock_t.assert_not_called()

    async def test_plan_translated_when_language_set(self):
        plan = {"cropName": "Rice", "generalTips": ["Transplant early"]}
        with patch("agriadvisor.pipeline.advisory.generate", AsyncMock(return_value=plan)), \
             patch("agriadvisor.pipeline.advisory.translate_text", side_effect=_tag_translation):
            result = await generate_crop_plan("Rice", language="ta", api_key="k")

        assert result["generalTips"] == ["[ta]Transplant early"]


class TestDiagnoseDisease:
    async def test_prompt_carries_truncated_image(self):
        mock_generate = AsyncMock(return_value={"disease": "Early blight"})
        payload = "x" * 5000

        with patch("agriadvisor.pipeline.advisory.generate", mock_generate):
            result = await diagnose_disease(payload, "Tomato")

        assert result == {"disease": "Early blight"}
        prompt = mock_generate.call_args.args[0]
        assert "x" * IMAGE_PROMPT_CHARS in prompt
        assert "x" * (IMAGE_PROMPT_CHARS + 1) not in prompt
