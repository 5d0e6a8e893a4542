"""
Report Annotator

Asks a chat-completion model to write prose (strengths, risks,
recommendations, summary) around an already-scored report. The numbers are
never recomputed by the model.
"""
import json
from typing import Any, Dict, Optional

from openai import AsyncOpenAI, OpenAIError

from websustain.platform.config import settings
from websustain.platform.exceptions import AnnotationError, ConfigurationError
from websustain.platform.logger import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = """
You are a Web Sustainability Reporter.
You will receive a JSON payload containing precomputed numeric results (overall score, grade, dimension scores, CO2 estimate) and lightweight context.
Your job is ONLY to:
- Validate ranges (do not change numbers).
- Produce strengths, risks, recommendations, and a short_summary consistent with those numbers.
- Return a SINGLE JSON object exactly matching the schema.

Schema:
{
  "overall_score": number,
  "grade": "A"|"B"|"C"|"D"|"E",
  "est_co2_g_per_view": number,
  "dimensions": {
    "performance_efficiency": number,
    "accessibility": number,
    "energy_carbon": number,
    "hosting_policy": number,
    "responsible_ux": number
  },
  "strengths": string[],
  "risks": string[],
  "recommendations": string[],
  "short_summary": string
}

Rules:
- Never invent exact tech unless keywords appear in context.signal_counts (e.g., webp, cdn).
- If text is sparse, note uncertainty in risks.
- ≤6 items per list; crisp and actionable.
"""


class ReportAnnotator:
    def __init__(self, client: Optional[AsyncOpenAI] = None, model: Optional[str] = None):
        self._client = client
        self.model = model or settings.OPENAI_MODEL

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not settings.OPENAI_API_KEY:
                raise ConfigurationError("OpenAI API key is not configured")
            self._client = AsyncOpenAI(
                api_key=settings.OPENAI_API_KEY,
                base_url=settings.OPENAI_BASE_URL,
            )
        return self._client

    async def annotate(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Return the raw chat completion for the payload, as a plain dict."""
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                temperature=0,
                top_p=1,
                seed=42,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": json.dumps(payload)},
                ],
            )
        except ConfigurationError as e:
            raise AnnotationError(e.message) from e
        except OpenAIError as e:
            logger.error(f"Annotation request failed: {e}")
            raise AnnotationError(str(e)) from e

        logger.info(f"Annotation completed with model {self.model}")
        return completion.model_dump()
