"""
Summarization of transcripts through chat completions
"""

import logging
from typing import Any

from audio_pipeline.errors import SummarizationError
from audio_pipeline.transcriber import API_ERRORS

logger = logging.getLogger(__name__)

SUMMARY_INSTRUCTION = (
    "You will receive the transcript of a voice message. "
    "Detect the language of the transcript and write a short summary "
    "of it in that same language. "
    "Return only the summary text, without any introduction or comments."
)


class TranscriptSummarizer:
    """Summarizes text in the language it was written in"""

    def __init__(self, client: Any, model: str = "gpt-4o-mini", instruction: str = SUMMARY_INSTRUCTION):
        self.client = client
        self.model = model
        self.instruction = instruction

    async def summarize(self, text: str) -> str:
        """
        Raises:
            SummarizationError: on API errors, or when the response has no choices
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.instruction},
                    {"role": "user", "content": text},
                ],
            )
        except API_ERRORS as e:
            raise SummarizationError(f"Summarization request failed: {e}") from e

        choices = getattr(response, "choices", None)
        if not choices:
            raise SummarizationError("no choices returned")

        message = choices[0].message
        if message is None or message.content is None:
            raise SummarizationError("Malformed summarization response: empty message")

        summary = message.content.strip()
        logger.info(f"Summary completed: {len(summary)} characters")
        return summary
