#!/usr/bin/env python3
"""
toolchat Interactive CLI

A command-line chat with the tool-calling model, keeping the
conversation in memory for the session.
"""

import argparse
import json
import logging
import signal
import sys
import threading

from .config import config
from .llm_call import LLMClient, ProviderError
from .orchestration import OrchestrationLoop, build_tool_definitions

# Global shutdown flag for signal handling
_shutdown_requested = threading.Event()

logger = logging.getLogger(__name__)


def _signal_handler(signum: int, frame) -> None:
    """Handle SIGINT for graceful shutdown."""
    if _shutdown_requested.is_set():
        logger.debug("Force shutdown requested")
        sys.exit(1)
    logger.debug("Shutdown requested")
    _shutdown_requested.set()
    print("\n\nShutting down... (press Ctrl+C again to force)")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def print_banner() -> None:
    """Print the welcome banner."""
    print(
        f"""
toolchat - chat with {config.provider.model}

Available commands:
  /help     - Show this help message
  /trace    - Show the tool calls of the last answer
  /tools    - List available tools
  /clear    - Clear conversation history
  /quit     - Exit the CLI

Type your messages below.
"""
    )


def print_tools() -> None:
    """Print available tools."""
    print("\nAvailable Tools:")
    print("─" * 64)
    for i, tool in enumerate(build_tool_definitions(), start=1):
        function = tool["function"]
        print(f"{i}. {function['name'].ljust(28)} {function['description'][:80]}")
    print()


def print_trace(trace: list[dict]) -> None:
    """Print the step trace of the last turn."""
    if not trace:
        print("\nNo trace available. Send a message first.\n")
        return

    print("\n" + "═" * 70)
    for step in trace:
        print(f"┌─ Step {step['step']}" + ("  [FINAL]" if step["is_final"] else ""))
        if step["action"]:
            print(f"│  Tool: {step['action']}")
        if step["action_input"]:
            print(f"│  Input: {json.dumps(step['action_input'])}")
        if step["observation"]:
            obs = step["observation"]
            if len(obs) > 200:
                obs = obs[:200] + "..."
            print(f"│  Result: {obs}")
        print("└" + "─" * 68)
    print()


class InteractiveCLI:
    """Interactive chat session."""

    def __init__(self, llm_client: LLMClient | None = None):
        self.llm_client = llm_client or LLMClient()
        self.messages: list[dict] = []
        self.last_trace: list[dict] = []

    def clear_history(self) -> None:
        """Forget the conversation."""
        self.messages = []
        self.last_trace = []
        print("\nConversation history cleared.\n")

    def send(self, text: str) -> str:
        """Run one turn and remember the user message and the answer.

        Raises:
            ProviderError: If the model provider rejects the request.
        """
        conversation = [*self.messages, {"role": "user", "content": text}]
        loop = OrchestrationLoop(llm_client=self.llm_client)
        result = loop.run(conversation)
        self.last_trace = loop.get_trace()
        self.messages = [*conversation, {"role": "assistant", "content": result.answer}]
        return result.answer

    def process_query(self, query: str) -> bool:
        """Process a user message.

        Returns:
            True if should continue, False if shutdown requested
        """
        try:
            answer = self.send(query)
        except KeyboardInterrupt:
            _shutdown_requested.set()
            print("\n\nInterrupted, shutting down.\n")
            return False
        except ProviderError as e:
            print(f"\nError: {e}\n")
            return True

        if _shutdown_requested.is_set():
            return False

        print("\n" + answer + "\n")
        tools_used = [step["action"] for step in self.last_trace if step["action"]]
        if tools_used:
            print(f"(tools used: {', '.join(tools_used)}; /trace for details)\n")
        return True

    def run(self) -> None:
        """Run the interactive CLI loop."""
        print_banner()

        while not _shutdown_requested.is_set():
            try:
                user_input = input(">>> ").strip()
            except KeyboardInterrupt:
                if _shutdown_requested.is_set():
                    break
                print("\n\nType /quit to exit.\n")
                continue
            except EOFError:
                print("\nGoodbye!\n")
                break

            if not user_input:
                continue

            if user_input.startswith("/"):
                command = user_input.lower()
                if command in ("/quit", "/exit", "/q"):
                    print("\nGoodbye!\n")
                    break
                elif command in ("/help", "/h", "/?"):
                    print_banner()
                elif command == "/trace":
                    print_trace(self.last_trace)
                elif command == "/tools":
                    print_tools()
                elif command == "/clear":
                    self.clear_history()
                else:
                    print(f"\nUnknown command: {user_input}")
                    print("Type /help for available commands.\n")
            elif not self.process_query(user_input):
                break

        self.llm_client.close()


def main() -> None:
    """Main entry point."""
    signal.signal(signal.SIGINT, _signal_handler)

    parser = argparse.ArgumentParser(
        description="toolchat Interactive CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                   # Start interactive mode
  %(prog)s -v                                # Start with debug logging
  %(prog)s -q "Count words: hello world"     # Send one message and exit
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-q", "--query", type=str, help="Send a single message and exit")
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help=f"Model identifier (default: from MODEL_NAME env or {config.provider.model})",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output the answer and trace as JSON (for scripting)",
    )

    args = parser.parse_args()
    setup_logging(args.verbose)

    llm_client = LLMClient(model=args.model)

    if not args.query:
        InteractiveCLI(llm_client=llm_client).run()
        return

    cli = InteractiveCLI(llm_client=llm_client)
    try:
        answer = cli.send(args.query)
    except ProviderError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        llm_client.close()

    if args.json:
        print(json.dumps({"query": args.query, "answer": answer, "trace": cli.last_trace}, indent=2))
    else:
        print(answer)


if __name__ == "__main__":
    main()
