"""Structured LLM calls with validation-aware retries for navigators."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Sequence, TypeVar

from mirascope import llm
from pydantic import BaseModel, ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt

from .logging_utils import log_error, log_llm


ModelT = TypeVar("ModelT", bound=BaseModel)
LLM_TIMEOUT_SECONDS = 60.0


@dataclass(slots=True)
class ValidationFeedback:
    """Correction text for the model plus the raw issues for logging."""

    llm_text: str
    issues: Sequence[str]


def _preview(value: Any, *, limit: int = 80) -> str:
    if value is None:
        return "null"
    text = repr(value)
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def build_validation_feedback(error: ValidationError) -> ValidationFeedback:
    """Turn a pydantic ValidationError into retry instructions for the model."""

    issues: list[str] = []
    for err in error.errors(include_url=False):
        loc = ".".join(str(part) for part in err.get("loc", [])) or "root"
        details = f"{loc}: {err.get('msg', 'validation error')}"
        if err.get("type"):
            details += f" [type={err['type']}]"
        if "input" in err:
            details += f" | received={_preview(err['input'])}"
        issues.append(details)

    if not issues:
        issues.append("root: response did not match the expected schema")

    instructions = [
        "Your previous JSON response failed to validate against the required schema.",
        "Reply again with a corrected response that strictly matches the schema.",
        "Issues detected:",
    ]
    instructions.extend(f"- {issue}" for issue in issues)
    return ValidationFeedback(llm_text="\n".join(instructions), issues=issues)


async def call_llm_with_retries(
    *,
    system_prompt: str,
    user_prompt: str,
    llm_provider: str,
    llm_model: str,
    response_model: type[ModelT],
    max_attempts: int = 3,
    feedback_builder: Callable[[ValidationError], ValidationFeedback] = build_validation_feedback,
) -> ModelT:
    """Make a structured call, retrying only on schema validation failures.

    Feedback from a failed attempt is appended to the original prompt so the
    model keeps full context. Timeouts and provider errors propagate at once.
    The final ValidationError is re-raised once attempts are exhausted.
    """

    system_prompt = system_prompt.strip()
    base_user_prompt = user_prompt.strip()

    @llm.call(provider=llm_provider, model=llm_model, response_model=response_model)
    async def _invoke(prompt: str) -> str:
        return prompt

    feedback: ValidationFeedback | None = None
    attempt_number = 0

    async for attempt in AsyncRetrying(
        retry=retry_if_exception_type(ValidationError),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    ):
        with attempt:
            attempt_number += 1
            if attempt_number > 1:
                log_llm(
                    f"Retry {attempt_number}/{max_attempts} for {response_model.__name__}"
                )
            sections = [system_prompt, base_user_prompt]
            if feedback is not None:
                sections.append(feedback.llm_text)
            prompt = "\n\n".join(section for section in sections if section)
            try:
                return await asyncio.wait_for(_invoke(prompt), timeout=LLM_TIMEOUT_SECONDS)
            except ValidationError as exc:
                feedback = feedback_builder(exc)
                log_error(
                    f"{response_model.__name__} failed validation "
                    f"(attempt {attempt_number}/{max_attempts})"
                )
                for issue in feedback.issues:
                    log_error(f"    - {issue}")
                raise
            except asyncio.TimeoutError:
                log_error(
                    f"LLM call timed out after {int(LLM_TIMEOUT_SECONDS)}s "
                    f"for {response_model.__name__}"
                )
                raise

    raise RuntimeError("LLM retry loop exited without a result")
