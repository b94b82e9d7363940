import asyncio
import sys
import threading
import time

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from models.errors import LookoutValidationError
from models.lookout import PipelineStage, PipelineState
from orchestrator.command_detector import detect_lookout_command
from orchestrator.pipeline import LookoutPipeline, create_pipeline_from_env
from tools.web import get_session_cache

STAGE_LABELS = {
    PipelineStage.GENERATING_QUERY: "Generating search query",
    PipelineStage.SEARCHING: "Searching",
}

TYPE_BADGES = {"video": "[video]  ", "article": "[article]", "link": "[link]   "}


def show_loading_animation(stop_event: threading.Event, label: list) -> None:
    """
    Show a loading animation in the console.

    Args:
        stop_event: A threading.Event that will be set to stop the animation
        label: One-element list holding the current stage label
    """
    while not stop_event.is_set():
        for char in '|/-\\':
            if stop_event.is_set():
                break
            sys.stdout.write(f'\r\033[93m{label[0]} {char}\033[0m' + ' ' * 10)
            sys.stdout.flush()
            time.sleep(0.1)

    # Clear the loading line
    sys.stdout.write('\r' + ' ' * 50 + '\r')
    sys.stdout.flush()


def print_state(state: PipelineState) -> None:
    """Render a terminal pipeline state."""
    if state.generated_query:
        marker = " (original question)" if state.generated_query.used_fallback else ""
        print(f"\nSearch query: {state.generated_query.search_query}{marker}")

    if state.stage == PipelineStage.ERROR:
        print(f"\n\033[91m{state.error}\033[0m")
        for action in state.suggested_actions:
            print(f"  - {action}")

    for index, result in enumerate(state.results, start=1):
        badge = TYPE_BADGES.get(result.type.value, "")
        print(f"\n{index:>2}. {badge} {result.title}  ({result.source})")
        print(f"    {result.description}")
        print(f"    {result.url}")
    print()


def print_help() -> None:
    print("\n=== Available Commands ===")
    print("@lookout <question>  - Research a question")
    print("highlight <text>     - Add highlighted context for the next lookout")
    print("clear-highlights     - Drop highlighted context")
    print("open <n>             - Show the url of result n")
    print("retry                - Re-run the last lookout, skipping its cached results")
    print("stats                - Show search cache statistics")
    print("clear-cache          - Empty the search cache")
    print("exit/quit            - Exit the program\n")


async def run_with_animation(pipeline: LookoutPipeline, operation) -> PipelineState:
    """Await ``operation`` while a loading animation follows the pipeline stage."""
    label = ["Working"]
    stop_animation = threading.Event()

    def on_state(state: PipelineState):
        label[0] = STAGE_LABELS.get(state.stage, label[0])

    pipeline.listener = on_state
    loading_thread = threading.Thread(target=show_loading_animation, args=(stop_animation, label))
    loading_thread.daemon = True
    loading_thread.start()
    try:
        return await operation
    finally:
        # Ensure loading is stopped even if there's an error
        stop_animation.set()
        loading_thread.join()


async def chat_loop(pipeline: LookoutPipeline) -> None:
    highlights: list[str] = []

    print("\n=== Lookout ===")
    print("Type '@lookout <question>' to research, 'help' for commands, 'exit' to quit\n")

    while True:
        user_input = (await asyncio.to_thread(input, "You: ")).strip()

        if not user_input:
            continue

        lowered = user_input.lower()
        if lowered in ('exit', 'quit'):
            print("\nGoodbye!")
            break

        if lowered == 'help':
            print_help()
            continue

        if lowered == 'stats':
            stats = get_session_cache().stats()
            print("\n=== Search Cache ===")
            print(f"Entries: {stats['entries']} (limit: {stats['max_entries'] or 'none'})")
            print(f"Hits: {stats['hits']}  Misses: {stats['misses']}\n")
            continue

        if lowered == 'clear-cache':
            get_session_cache().clear()
            print("Search cache cleared.\n")
            continue

        if lowered.startswith('highlight '):
            highlights.append(user_input[len('highlight '):].strip())
            print(f"Highlighted snippets: {len(highlights)}\n")
            continue

        if lowered == 'clear-highlights':
            highlights.clear()
            print("Highlights cleared.\n")
            continue

        if lowered.startswith('open '):
            position = user_input[len('open '):].strip()
            results = pipeline.state.results
            if not position.isdigit() or not 1 <= int(position) <= len(results):
                print(f"No result {position}.\n")
                continue
            print(f"{pipeline.open_result(results[int(position) - 1].id)}\n")
            continue

        if lowered == 'retry':
            try:
                state = await run_with_animation(pipeline, pipeline.retry())
            except LookoutValidationError as e:
                print(f"{e}\n")
                continue
            print_state(state)
            continue

        command = detect_lookout_command(user_input, highlights)
        if not command.is_command:
            print("Not a lookout command. Type '@lookout <question>' or 'help'.\n")
            continue

        state = await run_with_animation(pipeline, pipeline.start(command))
        print_state(state)
        highlights.clear()


async def run() -> None:
    pipeline = create_pipeline_from_env()
    try:
        await chat_loop(pipeline)
    finally:
        pipeline.cancel()
        await pipeline.search_engine.aclose()
        await pipeline.query_generator.client.aclose()


def main():
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        print("\nExiting...")
    except ValueError as e:
        print(f"Error initializing client: {str(e)}")


if __name__ == "__main__":
    main()
