"""
# main.py

Module Contract
- Purpose: Application entry point. Builds the workspace (stores + gateway), then launches the GUI or runs a CLI mode.
- Inputs:
  - CLI mode: "gui" (default), "cli <name>", "list", "create <name> <creator> <purpose>", "ban <name>"
  - Environment: OPENROUTER_API_KEY, ASSISTANT_* overrides, GRADIO_* networking flags
- Outputs:
  - Starts a Gradio app (GUI) or a terminal chat loop; prints listings and creation results.
- Key functions:
  - build_workspace() → AssistantWorkspace fully wired with ban list, profile store, conversation store and gateway
  - run_cli(workspace, name): terminal chat with one assistant
- Side effects:
  - Creates data directories; reads/writes profile, ban list and conversation files.
"""
import argparse
import asyncio
import sys

from utils.logging_utils import get_logger, configure_logging
from config.app_config import (
    BANNED_FILE,
    CHAT_DIR,
    LOG_FILE,
    PROFILES_FILE,
    ensure_data_dirs,
)
from core.orchestrator import TurnStatus
from core.workspace import AssistantWorkspace, assistant_type_label, describe_creation
from models.model_gateway import ModelGateway
from storage.ban_list import BanList
from storage.conversation_store import ConversationStore
from storage.profile_store import ProfileStore

logger = get_logger("main")


def build_workspace() -> AssistantWorkspace:
    ensure_data_dirs()
    ban_list = BanList(BANNED_FILE)
    profile_store = ProfileStore(PROFILES_FILE, ban_list=ban_list)
    profile_store.load()
    conversation_store = ConversationStore(CHAT_DIR)
    gateway = ModelGateway()
    return AssistantWorkspace(profile_store, conversation_store, gateway)


def run_cli(workspace: AssistantWorkspace, name: str) -> int:
    try:
        session = workspace.open_session(name)
    except KeyError:
        print(f"Unknown assistant: {name}")
        return 1

    print(f"Chatting with {session.profile.name} ({session.profile.purpose}). Type 'exit' to quit.")
    for message in session.history:
        print(f"{message.role.value}: {message.content}")

    while True:
        try:
            text = input("You: ")
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if text.strip().lower() in {"exit", "quit"}:
            break
        result = asyncio.run(session.submit(text))
        if result.status == TurnStatus.COMPLETED:
            print(f"{session.profile.name}: {result.message.content}")
        elif result.status == TurnStatus.FAILED:
            print(f"[error] {result.error}")
    return 0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Scoped AI assistants")
    sub = parser.add_subparsers(dest="mode")

    sub.add_parser("gui", help="Launch the web UI (default)")

    cli = sub.add_parser("cli", help="Chat with an assistant in the terminal")
    cli.add_argument("name")

    sub.add_parser("list", help="List assistants")

    create = sub.add_parser("create", help="Create an assistant")
    create.add_argument("name")
    create.add_argument("creator")
    create.add_argument("purpose")

    ban = sub.add_parser("ban", help="Ban an assistant name")
    ban.add_argument("name")

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(file_path=LOG_FILE)
    workspace = build_workspace()
    mode = args.mode or "gui"

    try:
        if mode == "gui":
            from gui.launch import launch_gui
            launch_gui(workspace)
            return 0
        if mode == "cli":
            return run_cli(workspace, args.name)
        if mode == "list":
            for profile in workspace.list_assistants():
                print(f"{profile.name} [{assistant_type_label(profile)}] by {profile.creator}: {profile.purpose}")
            return 0
        if mode == "create":
            result = workspace.create_assistant(args.name, args.purpose, args.creator)
            if not result.ok:
                print(result.rejection.message)
                return 1
            print(describe_creation(result.profile))
            return 0
        if mode == "ban":
            workspace.ban_assistant(args.name)
            print(f"AI '{args.name}' has been removed from your list.")
            return 0
    finally:
        workspace.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
