"""Advisory pipelines — prompt → Gemini → (translation) per use case.

Three flows share the generation client:
  1. Farm advisory report: free-text advisory, translated as one blob,
     rendered to PDF by the route.
  2. Crop plan: structured JSON plan, translated leaf string by leaf
     string (one sequential call per field).
  3. Disease detection: structured diagnosis, returned untranslated.

All upstream calls within one request run strictly one after another.
"""

import logging

from agriadvisor.core.types import FarmProfile
from agriadvisor.observability.prompts import get_active_prompt
from agriadvisor.observability.tracing import trace
from agriadvisor.retrieval.llm import AdvisoryResult, generate
from agriadvisor.retrieval.translate import translate_text

logger = logging.getLogger(__name__)

REPORT_TITLE = "Farm Advisory Report"

# Only this much of the base64 payload reaches the model
IMAGE_PROMPT_CHARS = 1000

# CropPlan fields translated in place; cropName and totalDuration stay as-is
PHASE_TEXT_FIELDS = ("phaseName", "weekRange")
TASK_TEXT_FIELDS = ("task", "description", "importance")
PLAN_LIST_FIELDS = ("generalTips", "warnings")


def wants_translation(language: str | None) -> bool:
    return bool(language) and language != "en"


# ---------------------------------------------------------------------------
# Prompt builders
# ---------------------------------------------------------------------------

def build_advisory_prompt(profile: FarmProfile) -> str:
    return get_active_prompt("farm_advisory").format(
        location=profile.location,
        land_size=profile.land_size,
        land_type=profile.land_type,
        land_health=profile.land_health,
        water_facility=profile.water_facility,
        duration=profile.duration,
    )


def build_crop_plan_prompt(
    crop_name: str,
    location: str | None = None,
    land_size: str | None = None,
    land_type: str | None = None,
    season: str | None = None,
) -> str:
    """Crop plan prompt; farm details are appended only when supplied."""
    details = [
        f"- {label}: {value}"
        for label, value in (
            ("Location", location),
            ("Land Size", land_size),
            ("Soil Type", land_type),
            ("Season", season),
        )
        if value
    ]
    context = ""
    if details:
        context = "\nFarm Details:\n" + "\n".join(details) + "\n"
    return get_active_prompt("crop_plan").format(crop_name=crop_name, context=context)


def build_disease_prompt(image_base64: str, crop_type: str | None = None) -> str:
    return get_active_prompt("disease_detection").format(
        crop_type=crop_type or "Unknown",
        image_excerpt=image_base64[:IMAGE_PROMPT_CHARS],
    )


# ---------------------------------------------------------------------------
# Translation walkers
# ---------------------------------------------------------------------------

async def translate_leaves(value, language: str, api_key: str | None):
    """Translate every string in a JSON-like value, depth first, in order."""
    if isinstance(value, str):
        return await translate_text(value, language, "en", api_key)
    if isinstance(value, list):
        return [await translate_leaves(item, language, api_key) for item in value]
    if isinstance(value, dict):
        return {k: await translate_leaves(v, language, api_key) for k, v in value.items()}
    return value


async def _translate_fields(obj: dict, fields: tuple[str, ...], language: str, api_key: str | None) -> None:
    for name in fields:
        if isinstance(obj.get(name), str) and obj[name]:
            obj[name] = await translate_text(obj[name], language, "en", api_key)


async def _translate_string_list(items: list, language: str, api_key: str | None) -> None:
    for i, item in enumerate(items):
        if isinstance(item, str):
            items[i] = await translate_text(item, language, "en", api_key)


async def translate_crop_plan(plan: dict, language: str, api_key: str | None) -> dict:
    """Translate the CropPlan text fields in place and return the same dict.

    Each field is an independent best-effort call, so one failed field
    leaves only that field in English.
    """
    for phase in plan.get("phases") or []:
        if not isinstance(phase, dict):
            continue
        await _translate_fields(phase, PHASE_TEXT_FIELDS, language, api_key)
        for task in phase.get("tasks") or []:
            if isinstance(task, dict):
                await _translate_fields(task, TASK_TEXT_FIELDS, language, api_key)
        if isinstance(phase.get("milestones"), list):
            await _translate_string_list(phase["milestones"], language, api_key)

    for name in PLAN_LIST_FIELDS:
        if isinstance(plan.get(name), list):
            await _translate_string_list(plan[name], language, api_key)
    return plan


# ---------------------------------------------------------------------------
# Pipelines
# ---------------------------------------------------------------------------

@trace(name="generate_advisory_report", span_type="CHAIN")
async def generate_advisory_report(
    profile: FarmProfile,
    api_key: str | None = None,
) -> tuple[str, AdvisoryResult]:
    """Generate the advisory and, for non-English profiles, translate it and the title.

    Returns:
        (title, result) ready for the PDF renderer.
    """
    result = await generate(build_advisory_prompt(profile))

    title = REPORT_TITLE
    if wants_translation(profile.language):
        logger.info(
            "Translating advisory and title to %s", profile.language,
            extra={"language": profile.language, "step": "translate"},
        )
        result = await translate_leaves(result, profile.language, api_key)
        title = await translate_text(title, profile.language, "en", api_key)
    return title, result


@trace(name="generate_crop_plan", span_type="CHAIN")
async def generate_crop_plan(
    crop_name: str,
    location: str | None = None,
    land_size: str | None = None,
    land_type: str | None = None,
    season: str | None = None,
    language: str | None = None,
    api_key: str | None = None,
) -> AdvisoryResult:
    """Generate a week-by-week plan for one crop, translated if requested."""
    plan = await generate(build_crop_plan_prompt(crop_name, location, land_size, land_type, season))

    if wants_translation(language):
        if isinstance(plan, dict):
            plan = await translate_crop_plan(plan, language, api_key)
        else:
            logger.warning("Crop plan reply was not JSON; returning it untranslated")
    return plan


@trace(name="diagnose_disease", span_type="CHAIN")
async def diagnose_disease(image_base64: str, crop_type: str | None = None) -> AdvisoryResult:
    """Ask the model for a diagnosis of a crop image (first 1000 chars of payload)."""
    if len(image_base64) > IMAGE_PROMPT_CHARS:
        logger.info(
            "Image payload truncated from %d to %d chars", len(image_base64), IMAGE_PROMPT_CHARS,
            extra={"step": "diagnose"},
        )
    return await generate(build_disease_prompt(image_base64, crop_type))
