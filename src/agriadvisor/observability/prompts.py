"""Prompt registry — versioned prompt templates for MLflow tracking.

Extracts prompt strings into a versionable module so that:
1. Each CLI report run logs the exact prompt template used as an MLflow artifact
2. Prompt variants can be compared in the MLflow UI
3. Prompts are decoupled from pipeline code

Templates use `str.format` placeholders; literal JSON braces are doubled.
"""

import logging

from agriadvisor.observability.tracing import log_text, set_tag

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Prompt versions
# ---------------------------------------------------------------------------

FARM_ADVISORY_PROMPT_V1 = """
You are an expert agricultural advisor. Generate a professional farm advisory report in a strict \
line-by-line format with extra spacing for readability. The report should include accurate labor, \
total investment, and profit calculations, and include credible resource links for each data point \
(yield, price, fertilizer, labor, irrigation, etc.) so the report can be verified.

Farm Details:
- Location: {location}, India
- Land Size: {land_size}
- Soil Type: {land_type}
- Soil Health: {land_health}
- Water Availability: {water_facility}
- Crop Duration Preference: {duration}

Instructions for AI:
1. Provide a summary of the farm.
2. List top 5 profitable crop options suitable for the soil, water, and crop duration.
3. For each crop, provide line-by-line details with extra spacing:
   - Yield: Low/High (kg/acre or tonnes/acre)
   - Market Price: Low/High (Rs/kg or Rs/tonne)
   - Water Needs
   - Fertilizer Requirements (NPK & micronutrients)
   - Labor Requirements (land prep, sowing, irrigation, weeding, fertilization, harvesting) in person-days
   - Cost Breakdown per acre: Seeds, Fertilizer, Labor, Irrigation, Other
   - Total Investment per acre
   - Profitability: Low Yield/Low Price and High Yield/High Price
4. Recommend the best crop(s) for this farm with reasoning.
5. Include a profit & cost table in markdown format with line breaks in headers.
6. End with a disclaimer about variability in yield, price, and labor.

Formatting Rules:
- Strict line-by-line format with extra blank lines between sections for readability, no paragraphs. \
Each point on a separate line.
- Use numbered/bulleted lists where appropriate.
- No bold or italic markdown.
- Include URLs for all sources.
- Make it professional, clear, and trustworthy.

Example output format:

Farm Summary:

- Location: ...

- Land Size: ...

- Soil Type: ...

...

Top 5 Crop Options:

1. Crop Name

2. Crop Name

...

Detailed Crop Analysis:

1. Crop Name:

   - Yield: Low/High (kg/acre or tonnes/acre)

   - Price: Low/High (Rs/kg or Rs/tonne)

   - Water Needs: ...

   - Fertilizer: ...

   - Labor Requirements: ... person-days

   - Cost Breakdown per acre: Seeds-..., Fertilizer-..., Labor-..., Irrigation-..., Other-...

   - Total Investment: Rs ...

   - Profitability: Low Yield/Low Price- Rs ..., High Yield/High Price- Rs ...

...

Best Crop Recommendation:

- Crop Name [Reason]

Profit & Cost Table:

| Crop | Yield Low/High (kg/acre or tonnes/acre) | Price Low/High (Rs/kg or Rs/tonne) | Total Cost (Rs/acre) \
| Gross Revenue Low/High (Rs/acre) | Net Profit Low/High (Rs/acre) |

|------|-----------------------------------------|------------------------------------|----------------------\
|-----------------------------------|-------------------------------|

...

Disclaimer:
"""

CROP_PLAN_PROMPT_V1 = """
You are an expert agricultural consultant. Create a detailed farming plan for {crop_name}:
- Include daily/weekly tasks
- Include fertilizers, pesticides, and their doses
- Include milestones
- Include general tips and warnings
{context}
Use JSON ONLY with this structure:
{{
  "cropName": "{crop_name}",
  "totalDuration": "string",
  "phases": [
    {{
      "phaseName":"string",
      "weekRange":"string",
      "tasks":[
        {{ "task":"string", "description":"string", "importance":"High/Medium/Low" }}
      ],
      "milestones":["string"]
    }}
  ],
  "generalTips":["string"],
  "warnings":["string"]
}}
"""

DISEASE_DETECTION_PROMPT_V1 = """
You are an expert plant pathologist. Analyze this crop image for diseases. Crop type: {crop_type}
Image data (truncated): {image_excerpt}...

Return ONLY JSON:
{{
  "disease":"string",
  "confidence":"string",
  "severity":"string",
  "description":"string",
  "symptoms":["string"],
  "causes":["string"],
  "treatment":{{
    "immediate":["string"],
    "chemical":["string"],
    "preventive":["string"]
  }},
  "timeline":"string",
  "recommendations":["string"]
}}
"""

# Registry: name → (version, prompt_text)
_PROMPT_REGISTRY: dict[str, tuple[str, str]] = {
    "farm_advisory": ("v1", FARM_ADVISORY_PROMPT_V1),
    "crop_plan": ("v1", CROP_PLAN_PROMPT_V1),
    "disease_detection": ("v1", DISEASE_DETECTION_PROMPT_V1),
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_active_prompt(name: str) -> str:
    """Return the active prompt template for a given prompt name.

    Args:
        name: Prompt identifier (e.g., "farm_advisory").

    Returns:
        The template string.

    Raises:
        KeyError: If prompt name is not registered.
    """
    if name not in _PROMPT_REGISTRY:
        raise KeyError(f"Unknown prompt: {name!r}. Available: {list(_PROMPT_REGISTRY.keys())}")
    return _PROMPT_REGISTRY[name][1]


def get_prompt_version(name: str) -> str:
    """Return the version tag for a given prompt name."""
    if name not in _PROMPT_REGISTRY:
        raise KeyError(f"Unknown prompt: {name!r}. Available: {list(_PROMPT_REGISTRY.keys())}")
    return _PROMPT_REGISTRY[name][0]


def list_prompts() -> list[dict[str, str]]:
    """List all registered prompts with name and version."""
    return [{"name": name, "version": ver} for name, (ver, _) in _PROMPT_REGISTRY.items()]


def log_prompt_to_run(name: str) -> None:
    """Log the active prompt template as an MLflow artifact for the current run.

    Call this inside an active `start_run()` context.
    """
    version, text = _PROMPT_REGISTRY[name]
    log_text(text, f"prompts/{name}_{version}.txt")
    set_tag(f"prompt_{name}_version", version)
    logger.debug("Logged prompt %s (%s) to MLflow run", name, version)
