"""
# gui/launch.py

Module Contract
- Purpose: Define and launch the Gradio UI. "Create Assistant" and "Chat" tabs wired to gui.handlers.
- Inputs:
  - AssistantWorkspace instance (built in main). Environment flags for networking.
- Outputs:
  - Running local web app.
- Key pieces:
  - build_ui(workspace) → gr.Blocks
  - launch_gui(workspace): networking flags + demo.launch()
  - The send button is disabled while a turn is pending and re-enabled when it resolves.
- Threading/Async: Gradio runs async handlers on its event loop; the gateway call runs in a worker thread.
"""
import os
import socket

import gradio as gr

from gui.handlers import (
    assistant_choices,
    handle_ban,
    handle_create,
    handle_select,
    handle_submit,
)
from utils.logging_utils import get_logger

logger = get_logger("gradio_gui")


def _env_flag(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _find_free_port(preferred: int = 7860) -> int:
    # Try preferred first; if taken, find an ephemeral free port.
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind(("", preferred))
            return preferred
        except OSError:
            pass
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("", 0))
        return s.getsockname()[1]


def build_ui(workspace):
    with gr.Blocks(theme="soft") as demo:
        gr.Markdown("## 🤖 Scoped AI Assistants")

        with gr.Tabs():
            with gr.TabItem("Chat"):
                with gr.Row():
                    assistant = gr.Dropdown(
                        label="Assistant",
                        choices=assistant_choices(workspace),
                        value=None,
                    )
                    ban_button = gr.Button("🚫 Ban Assistant", variant="stop")
                status_md = gr.Markdown(value="")
                chatbot = gr.Chatbot(label="Conversation", height=520, type="messages")
                user_input = gr.Textbox(lines=2, placeholder="Ask your assistant something...", label="Your Message")
                send_button = gr.Button("Send", variant="primary")

                async def _submit(name, text):
                    return await handle_submit(workspace, name, text)

                def _busy():
                    return gr.update(interactive=False, value="Sending...")

                def _ready():
                    return gr.update(interactive=True, value="Send")

                def _ban(name):
                    status, choices, messages = handle_ban(workspace, name)
                    return status, gr.update(choices=choices, value=None), messages

                assistant.change(
                    lambda name: handle_select(workspace, name),
                    inputs=[assistant],
                    outputs=[chatbot, status_md],
                )
                for trigger in (send_button.click, user_input.submit):
                    trigger(_busy, inputs=[], outputs=[send_button]).then(
                        _submit,
                        inputs=[assistant, user_input],
                        outputs=[chatbot, user_input, status_md],
                    ).then(_ready, inputs=[], outputs=[send_button])
                ban_button.click(_ban, inputs=[assistant], outputs=[status_md, assistant, chatbot])

            with gr.TabItem("Create Assistant"):
                creator = gr.Textbox(label="Your Name")
                name = gr.Textbox(label="AI Name")
                purpose = gr.Textbox(
                    lines=4,
                    label="Purpose",
                    placeholder="Describe exactly what this AI may answer (at least 15 characters).",
                )
                create_button = gr.Button("Create", variant="primary")
                create_status = gr.Markdown(value="")

                def _create(creator_text, name_text, purpose_text):
                    status, choices = handle_create(workspace, creator_text, name_text, purpose_text)
                    return status.replace("\n", "  \n"), gr.update(choices=choices)

                create_button.click(
                    _create,
                    inputs=[creator, name, purpose],
                    outputs=[create_status, assistant],
                )

    return demo


def launch_gui(workspace):
    # GRADIO_SHARE: 1/true to request a public tunnel; local only by default
    # GRADIO_SERVER_NAME: "127.0.0.1" for local, "0.0.0.0" for LAN
    share = _env_flag("GRADIO_SHARE", False)
    server_name = os.getenv("GRADIO_SERVER_NAME", "127.0.0.1")
    port = _find_free_port(int(os.getenv("GRADIO_PORT", "7860")))

    demo = build_ui(workspace)
    demo.queue(default_concurrency_limit=1)
    logger.info(f"Launching UI on {server_name}:{port} (share={share})")
    demo.launch(server_name=server_name, server_port=port, share=share)
