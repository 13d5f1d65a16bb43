"""NiceGUI chat interface for the research assistant."""

from collections.abc import Sequence

from nicegui import events, ui

from research_client.config import MODEL_OPTIONS
from research_client.interaction.orchestrator import InteractionOrchestrator
from research_client.models.schemas import Message, Session, Speaker, ToastLevel, UploadFile
from research_client.sessions.store import SessionStore, session_timestamp_label

NOTIFY_TYPES = {
    ToastLevel.SUCCESS: "positive",
    ToastLevel.ERROR: "negative",
    ToastLevel.WARNING: "warning",
    ToastLevel.INFO: "info",
}

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: linear-gradient(135deg, #2563eb 0%, #1e40af 100%); }

    .message-human {
        background: linear-gradient(135deg, #2563eb 0%, #1e40af 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .message-error {
        background: #fef2f2;
        color: #991b1b;
        border: 1px solid #fecaca;
        border-radius: 18px 18px 18px 4px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #2563eb;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .session-item { border-radius: 10px; cursor: pointer; }
    .session-item:hover { background: #f3f4f6; }
    .session-current { background: #dbeafe; }
</style>
"""


class NiceGuiNotifier:
    """Shows orchestrator notifications as NiceGUI toasts."""

    def notify(self, level: ToastLevel, title: str, message: str) -> None:
        ui.notify(f"{title}: {message}", type=NOTIFY_TYPES[level], position="top-right")


def register_chat_page(store: SessionStore, orchestrator: InteractionOrchestrator) -> None:
    """Register the chat page at ``/``.

    Args:
        store: Session store the page reads from.
        orchestrator: Handles every action that talks to the backend.
    """

    @ui.page("/")
    async def chat_page() -> None:
        ui.add_head_html(CUSTOM_CSS)

        messages_container: ui.column
        sessions_container: ui.column
        input_field: ui.textarea
        send_btn: ui.button

        def render_avatar(is_human: bool) -> None:
            color = "bg-blue-700" if is_human else "bg-gray-500"
            icon = "person" if is_human else "science"
            with ui.element("div").classes(
                f"w-9 h-9 rounded-full flex items-center justify-center {color}"
            ):
                ui.icon(icon).classes("text-white text-lg")

        def render_message(msg: Message) -> None:
            is_human = msg.speaker is Speaker.HUMAN
            align = "justify-end" if is_human else "justify-start"
            if is_human:
                bubble = "message-human"
            elif msg.is_error:
                bubble = "message-error"
            else:
                bubble = "message-assistant"

            with ui.row().classes(f"w-full {align} gap-3 items-end"):
                if not is_human:
                    render_avatar(False)
                with ui.column().classes("max-w-[70%] gap-1"):
                    with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                        if msg.is_pending:
                            with ui.row().classes("items-center gap-2"):
                                with ui.row().classes("gap-1"):
                                    for _ in range(3):
                                        ui.element("div").classes("typing-dot")
                                ui.label(msg.text).classes("text-sm text-gray-500 italic")
                        elif is_human:
                            ui.label(msg.text).classes("text-sm whitespace-pre-wrap")
                        else:
                            ui.markdown(msg.text).classes("text-sm leading-relaxed")
                    ui.label(msg.timestamp.astimezone().strftime("%I:%M %p")).classes(
                        f"text-[10px] text-gray-400 {'self-end' if is_human else 'self-start'}"
                    )
                if is_human:
                    render_avatar(True)

        def refresh_messages() -> None:
            messages_container.clear()
            session = store.current
            with messages_container:
                if session is None or not session.messages:
                    with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                        ui.icon("forum").classes("text-5xl text-gray-300")
                        ui.label("Ask a research question to start").classes(
                            "text-lg text-gray-400"
                        )
                else:
                    for msg in session.messages:
                        render_message(msg)
                if orchestrator.busy:
                    render_message(Message.pending())

        def render_session(session: Session) -> None:
            current = "session-current" if session.session_id == store.current_id else ""
            with ui.row().classes(f"w-full items-center px-3 py-2 session-item {current}"):
                with ui.column().classes("flex-grow gap-0").on(
                    "click", lambda s=session: select_session(s)
                ):
                    ui.label(session.name).classes("text-sm font-medium truncate")
                    count = len(session.messages)
                    meta = f"{session_timestamp_label(session)} \u00b7 {count} message(s)"
                    ui.label(meta).classes("text-xs text-gray-400")
                ui.button(
                    icon="delete", on_click=lambda s=session: delete_session(s)
                ).props("flat round dense size=sm color=grey")

        def refresh_sessions() -> None:
            sessions_container.clear()
            with sessions_container:
                if not len(store):
                    ui.label("No conversations yet").classes("text-sm text-gray-400 p-3")
                for session in store.sessions:
                    render_session(session)

        def refresh_all() -> None:
            refresh_sessions()
            refresh_messages()
            if orchestrator.busy:
                send_btn.disable()
            else:
                send_btn.enable()

        def select_session(session: Session) -> None:
            store.set_current(session)
            refresh_all()

        def delete_session(session: Session) -> None:
            store.delete_session(session.session_id)
            refresh_all()

        def new_session() -> None:
            name = name_input.value.strip() or None
            store.create_session(name, make_current=True)
            name_input.value = ""
            refresh_all()

        async def send_message() -> None:
            text = input_field.value.strip()
            if not text:
                return
            if not orchestrator.busy:
                input_field.value = ""
            await orchestrator.submit_query(text)
            refresh_all()

        async def handle_upload(e: events.MultiUploadEventArguments) -> None:
            files = [
                UploadFile(
                    filename=f.name,
                    content=await f.read(),
                    content_type=f.content_type or "application/octet-stream",
                )
                for f in e.files
            ]
            await upload_files(files)
            uploader.reset()

        async def upload_files(files: Sequence[UploadFile]) -> None:
            await orchestrator.submit_upload(files)
            refresh_all()

        def change_provider(e: events.ValueChangeEventArguments) -> None:
            orchestrator.select_provider(e.value)
            model_select.set_options(MODEL_OPTIONS[e.value], value=orchestrator.model)

        def change_model(e: events.ValueChangeEventArguments) -> None:
            if e.value:
                orchestrator.select_model(e.value)

        # === UI Layout ===
        with ui.left_drawer(value=True).classes("bg-white p-4"):
            ui.label("Conversations").classes("text-base font-semibold")
            with ui.row().classes("w-full items-center gap-2 no-wrap"):
                name_input = ui.input(placeholder="Session name (optional)").props(
                    "dense outlined"
                ).classes("flex-grow")
                ui.button(icon="add", on_click=new_session).props("round unelevated color=primary")
            sessions_container = ui.column().classes("w-full gap-1 mt-2")
            ui.label(f"Keeps the {store.capacity} most recent conversations").classes(
                "text-xs text-gray-400 mt-2"
            )

        with (
            ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
            ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
                "height: calc(100vh - 4rem)"
            ),
        ):
            # Header
            with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
                with ui.row().classes("items-center gap-3"):
                    ui.icon("science").classes("text-white text-3xl")
                    ui.label("Research Assistant").classes("text-lg font-semibold text-white")
                with ui.row().classes("items-center gap-2"):
                    ui.select(
                        list(MODEL_OPTIONS),
                        value=orchestrator.provider,
                        on_change=change_provider,
                    ).props("dense dark borderless").classes("text-white")
                    model_select = ui.select(
                        MODEL_OPTIONS[orchestrator.provider],
                        value=orchestrator.model,
                        on_change=change_model,
                    ).props("dense dark borderless").classes("text-white")

            # Messages
            with (
                ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
                ui.column().classes("w-full p-5"),
            ):
                messages_container = ui.column().classes("w-full gap-4")

            # Input
            with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
                uploader = ui.upload(
                    on_multi_upload=handle_upload, multiple=True, auto_upload=True
                ).props("flat dense accept=.pdf,.doc,.docx,.txt,.png,.jpg,.jpeg").classes(
                    "w-40"
                )
                input_field = (
                    ui.textarea(placeholder="Ask a research question...")
                    .props("autogrow borderless dense rows=1")
                    .classes("flex-grow")
                    .on("keydown.enter.prevent", send_message)
                )
                send_btn = ui.button(icon="send", on_click=send_message).props(
                    "round unelevated color=primary"
                )

        refresh_all()
        orchestrator.add_listener(refresh_all)
        client = ui.context.client
        client.on_disconnect(lambda: orchestrator.remove_listener(refresh_all))
        await client.connected()
        await orchestrator.check_health()
