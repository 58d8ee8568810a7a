"""
Tool-calling orchestration loop.

Drives one conversation turn to completion over the provider's native
function-calling API. Each step sends the history plus the tool
declarations; when the model asks for a tool, the first requested call is
executed through the ToolRegistry, the assistant request and the tool
result are appended to a new copy of the history, and the model is asked
again. A response without tool calls ends the turn and is returned as-is.

The number of tool round-trips is bounded by ``max_tool_rounds``; once it
is reached, one last call is made with ``tool_choice="none"`` so the model
has to answer with what it already has.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ..config import config
from ..llm_call import LLMClient
from ..tools.registry import ToolRegistry, is_tool_error, tool_error
from ..tracing import TracingContext
from .tool_defs import build_tool_definitions

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant with access to a few tools. "
    "Answer in Markdown: use short paragraphs, bullet lists for enumerations, "
    "and render links as [title](url). "
    "Only call a tool when the user's request explicitly calls for what it does "
    "(sentiment analysis, counting words, the current date or time, or Hacker News "
    "top stories). Otherwise answer directly. "
    "When you use a tool, explain its result in your own words instead of "
    "repeating the raw data."
)


@dataclass
class OrchestrationStep:
    """A single model call in the orchestration process."""

    step_number: int
    action: Optional[str] = None
    action_input: Optional[dict] = None
    observation: Optional[str] = None
    is_final: bool = False
    final_answer: Optional[str] = None


@dataclass
class OrchestrationResult:
    """Result from a complete orchestration turn."""

    response: dict
    messages: list[dict] = field(default_factory=list)
    steps: list[OrchestrationStep] = field(default_factory=list)

    @property
    def answer(self) -> str:
        """Display text of the final response."""
        return _response_message(self.response).get("content") or ""

    @property
    def tools_used(self) -> list[str]:
        return [s.action for s in self.steps if s.action]


def _response_message(response: dict) -> dict:
    """The first choice's message of a completion envelope, or {}."""
    choices = response.get("choices") or [{}]
    return choices[0].get("message") or {}


class OrchestrationLoop:
    """
    Iterative tool-calling loop over a chat-completions provider.

    Per-step flow:
        1. Call the model with the history and tool declarations
        2. No tool call in the response: return it as the final answer
        3. Otherwise take the first tool call, decode its arguments
        4. Execute it via the ToolRegistry (errors come back as data)
        5. Extend the history with the assistant request and the tool result
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        max_tool_rounds: Optional[int] = None,
        system_prompt_enabled: Optional[bool] = None,
        execution_id: Optional[str] = None,
        tracing_context: Optional[TracingContext] = None,
    ):
        self.llm_client = llm_client or LLMClient()
        self.max_tool_rounds = (
            max_tool_rounds
            if max_tool_rounds is not None
            else config.orchestrator.max_tool_rounds
        )
        self.system_prompt_enabled = (
            system_prompt_enabled
            if system_prompt_enabled is not None
            else config.orchestrator.system_prompt_enabled
        )
        self.execution_id = execution_id
        self.tracing_context = tracing_context
        self.tools = build_tool_definitions()

        self.steps: list[OrchestrationStep] = []

    @property
    def _id_prefix(self) -> str:
        return f"[{self.execution_id}] " if self.execution_id else ""

    def run(self, messages: list[dict]) -> OrchestrationResult:
        """
        Run one conversation turn.

        Args:
            messages: Conversation so far, in provider message format.
                The list is not modified.

        Returns:
            OrchestrationResult with the final provider response, the
            history that produced it, and the step trace.

        Raises:
            ProviderError: If a model call fails.
        """
        self.steps = []
        history = self._prepare_history(messages)

        for step_num in range(1, self.max_tool_rounds + 2):
            step = OrchestrationStep(step_number=step_num)
            forced = step_num > self.max_tool_rounds
            if forced:
                logger.warning(
                    "%sMax tool rounds (%d) reached, forcing answer",
                    self._id_prefix,
                    self.max_tool_rounds,
                )

            response = self._call_model(
                history, step_num, tool_choice="none" if forced else "auto"
            )
            message = _response_message(response)
            tool_call = None if forced else self._first_tool_call(message)

            if tool_call is None:
                step.is_final = True
                step.final_answer = message.get("content")
                self.steps.append(step)
                self._log_trace_summary()
                return OrchestrationResult(
                    response=response, messages=history, steps=list(self.steps)
                )

            name = tool_call.get("function", {}).get("name", "")
            step.action = name
            try:
                arguments = self._parse_arguments(tool_call)
            except (TypeError, ValueError) as e:
                logger.warning(
                    "%sUndecodable arguments for tool '%s': %s", self._id_prefix, name, e
                )
                result = tool_error("Invalid tool arguments", str(e))
            else:
                step.action_input = arguments
                result = self._execute_tool(name, arguments, step_num)

            observation = json.dumps(result)
            step.observation = observation
            self.steps.append(step)

            history = [
                *history,
                {
                    "role": "assistant",
                    "content": message.get("content"),
                    "tool_calls": [tool_call],
                },
                {
                    "role": "tool",
                    "tool_call_id": tool_call.get("id"),
                    "content": observation,
                },
            ]

        # Unreachable: the forced step always returns
        raise RuntimeError("orchestration loop exited without a final response")

    def _prepare_history(self, messages: list[dict]) -> list[dict]:
        """Copy the caller's history, prefixed with the system prompt if it has none."""
        history = list(messages)
        if self.system_prompt_enabled and not any(
            m.get("role") == "system" for m in history
        ):
            history.insert(0, {"role": "system", "content": SYSTEM_PROMPT})
        return history

    def _first_tool_call(self, message: dict) -> Optional[dict]:
        """Pick the tool call to act on; any further calls are dropped."""
        tool_calls = message.get("tool_calls") or []
        if not tool_calls:
            return None
        if len(tool_calls) > 1:
            logger.warning(
                "%sModel requested %d tool calls, executing only '%s'",
                self._id_prefix,
                len(tool_calls),
                tool_calls[0].get("function", {}).get("name"),
            )
        return tool_calls[0]

    @staticmethod
    def _parse_arguments(tool_call: dict) -> dict:
        """Decode a tool call's JSON ``arguments`` string.

        Raises:
            ValueError: If the arguments are not a JSON object.
            TypeError: If the arguments are neither a string nor a dict.
        """
        raw = tool_call.get("function", {}).get("arguments") or "{}"
        if isinstance(raw, dict):
            return raw
        arguments = json.loads(raw)
        if not isinstance(arguments, dict):
            raise ValueError(f"expected a JSON object, got {type(arguments).__name__}")
        return arguments

    def _call_model(self, history: list[dict], step_num: int, tool_choice: str) -> dict:
        """Send one chat-completions request for this step."""
        if self.tracing_context:
            with self.tracing_context.generation(
                name=f"model_step_{step_num}",
                model=self.llm_client.model,
                input=history,
                model_parameters={"tool_choice": tool_choice},
            ) as gen:
                try:
                    response = self.llm_client.create_completion(
                        history, tools=self.tools, tool_choice=tool_choice
                    )
                except Exception:
                    gen.set_status("error")
                    raise
                gen.set_output(_response_message(response))
                gen.set_usage(response.get("usage"))
                return response

        logger.debug("%sStep %d: calling model", self._id_prefix, step_num)
        return self.llm_client.create_completion(
            history, tools=self.tools, tool_choice=tool_choice
        )

    def _execute_tool(self, name: str, arguments: dict, step_num: int) -> Any:
        """Run a tool through the registry; never raises."""
        logger.info("%sStep %d: executing tool '%s'", self._id_prefix, step_num, name)

        if not self.tracing_context:
            return ToolRegistry.execute(name, arguments)

        with self.tracing_context.span(name=f"tool:{name}", input=arguments) as span:
            result = ToolRegistry.execute(name, arguments)
            span.set_output(result)
            if is_tool_error(result):
                span.set_status("error")
            return result

    def _log_trace_summary(self) -> None:
        """Log a compact trace summary."""
        for step in self.steps:
            if step.is_final:
                logger.info("%sStep %d [FINAL]", self._id_prefix, step.step_number)
                continue
            obs_preview = (
                (step.observation[:80] + "...")
                if step.observation and len(step.observation) > 80
                else step.observation
            )
            logger.info(
                "%sStep %d: %s -> %s",
                self._id_prefix,
                step.step_number,
                step.action,
                obs_preview,
            )

    def get_trace(self) -> list[dict]:
        """
        Get a trace of all orchestration steps.

        Returns:
            List of step dictionaries.
        """
        return [
            {
                "step": s.step_number,
                "action": s.action,
                "action_input": s.action_input,
                "observation": s.observation,
                "is_final": s.is_final,
                "final_answer": s.final_answer,
            }
            for s in self.steps
        ]
