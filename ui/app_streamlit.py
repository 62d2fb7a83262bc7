"""Streamlit front-end for Lotería: caller mode and versus-CPU mode."""

from __future__ import annotations

from pathlib import Path

import streamlit as st

from engine.board import WinCondition
from engine.caller import Announcer, CallerSession
from engine.cards import announcement_text, card_by_name, card_label, deserialize_card
from engine.clock import PolledClock
from engine.match import MatchController
from engine.pacing import Difficulty, Speed
from engine.service import BoardView, CallerService, MatchService, MatchView
from engine.settings_schema import GameSettings, load_settings, save_settings

SETTINGS_PATH = Path("data/settings.json")
REFRESH_SECONDS = 0.25


class ToastAnnouncer(Announcer):
    """Shows each newly called card as a toast on the next render."""

    def __init__(self, with_riddle: bool = False) -> None:
        self.with_riddle = with_riddle

    def announce(self, card_name: str) -> None:
        card = card_by_name(card_name)
        text = announcement_text(card, with_riddle=self.with_riddle) if card is not None else f"¡{card_name}!"
        st.toast(text)


def get_settings() -> GameSettings:
    if "settings" not in st.session_state:
        st.session_state["settings"] = load_settings(SETTINGS_PATH)
    return st.session_state["settings"]


def get_clock() -> PolledClock:
    if "clock" not in st.session_state:
        st.session_state["clock"] = PolledClock()
    return st.session_state["clock"]


def get_caller_service(settings: GameSettings) -> CallerService:
    if "caller_service" not in st.session_state:
        announcer = ToastAnnouncer(with_riddle=settings.caller.announce_riddles)
        announcer.muted = not settings.caller.voice_enabled
        session = CallerSession(get_clock(), speed=settings.caller.speed, announcer=announcer)
        st.session_state["caller_service"] = CallerService(session)
    return st.session_state["caller_service"]


def get_match_service(settings: GameSettings) -> MatchService:
    if "match_service" not in st.session_state:
        controller = MatchController(
            get_clock(),
            difficulty=settings.match.difficulty,
            win_conditions=settings.match.win_conditions,
        )
        st.session_state["match_service"] = MatchService(controller)
    return st.session_state["match_service"]


def render_current_card(payload) -> None:
    if payload is None:
        st.info("No card called yet.")
        return
    card = deserialize_card(payload)
    st.markdown(f"## {card.name}")
    st.caption(f"{card_label(card)} · {card.riddle}")


def render_caller(service: CallerService) -> None:
    view = service.get_view()
    render_current_card(view.current_card)
    st.progress(view.progress, text=f"{view.remaining_seconds:.1f}s · deck {view.deck_progress}")

    cols = st.columns(5)
    if view.state == "playing":
        if cols[0].button("Pause"):
            service.pause()
            st.rerun()
    elif cols[0].button("Play"):
        service.play()
        st.rerun()
    if cols[1].button("Next", disabled=not view.can_next):
        service.next()
        st.rerun()
    if cols[2].button("Previous", disabled=not view.can_previous):
        service.previous()
        st.rerun()
    if cols[3].button("Reshuffle"):
        service.reshuffle()
        st.rerun()
    speeds = [speed.value for speed in Speed]
    choice = cols[4].selectbox("Speed", speeds, index=speeds.index(view.speed), label_visibility="collapsed")
    if choice != view.speed:
        service.set_speed(choice)
        st.rerun()

    with st.expander(f"Called cards ({len(view.called_cards)})"):
        for payload in reversed(view.called_cards):
            card = deserialize_card(payload)
            if st.button(card_label(card), key=f"jump-{card.id}"):
                service.jump_to(card.id)
                st.rerun()


def rejected_mark_message(view: MatchView) -> str:
    if view.game_over:
        return "The game is over. Start a rematch to play again."
    if view.state != "playing":
        return "Cells can be marked only while cards are being called. Press Play."
    return "That card has not been called yet."


def render_board(board: BoardView, *, service: MatchService | None = None) -> None:
    winning = {index for line in board.winning_lines for index in line}
    for row in range(4):
        cols = st.columns(4)
        for cell in board.cells[row * 4:(row + 1) * 4]:
            index = cell.row * 4 + cell.col
            label = cell.card["name"]
            if cell.marked:
                label = f"✅ {label}"
            if index in winning:
                label = f"⭐ {label}"
            if service is None:
                cols[cell.col].write(label)
            elif cols[cell.col].button(label, key=f"cell-{cell.id}", disabled=cell.marked):
                view = service.mark(cell.id)
                if not view.accepted:
                    st.session_state["mark_warning"] = rejected_mark_message(view)
                st.rerun()


def render_match(service: MatchService) -> None:
    view = service.get_view()
    tally = view.tally
    st.write(f"You {tally.player_wins} · Draws {tally.draws} · CPU {tally.cpu_wins}")
    render_current_card(view.current_card)
    st.progress(view.progress, text=f"{view.remaining_seconds:.1f}s · deck {view.deck_progress}")

    if view.game_over:
        messages = {"player_wins": "¡Lotería! You win.", "cpu_wins": "The CPU wins.", "draw": "Draw."}
        st.success(messages[view.result])
        if st.button("Rematch"):
            service.rematch()
            st.rerun()
    elif view.state == "playing":
        if st.button("Pause"):
            service.pause()
            st.rerun()
    elif st.button("Play"):
        service.play()
        st.rerun()

    warning = st.session_state.pop("mark_warning", None)
    if warning:
        st.warning(warning)

    cols = st.columns(2)
    with cols[0]:
        st.subheader("Your board")
        render_board(view.player_board, service=service)
    with cols[1]:
        st.subheader("CPU board")
        render_board(view.cpu_board)


def render_sidebar(settings: GameSettings) -> None:
    st.sidebar.header("Settings")
    speeds = [speed.value for speed in Speed]
    difficulties = [difficulty.value for difficulty in Difficulty]
    speed = st.sidebar.selectbox("Caller speed", speeds, index=speeds.index(settings.caller.speed.value))
    voice = st.sidebar.checkbox("Announce cards", value=settings.caller.voice_enabled)
    riddles = st.sidebar.checkbox("Recite riddles", value=settings.caller.announce_riddles)
    difficulty = st.sidebar.selectbox(
        "Difficulty", difficulties, index=difficulties.index(settings.match.difficulty.value)
    )
    conditions = st.sidebar.multiselect(
        "Win conditions",
        [condition.value for condition in WinCondition],
        default=[condition.value for condition in settings.match.win_conditions],
    )
    if st.sidebar.button("Save settings"):
        try:
            updated = GameSettings(
                caller={"speed": speed, "voice_enabled": voice, "announce_riddles": riddles},
                match={"difficulty": difficulty, "win_conditions": conditions},
            )
        except ValueError as exc:
            st.sidebar.error(str(exc))
            return
        save_settings(updated, SETTINGS_PATH)
        st.session_state["settings"] = updated
        st.session_state.pop("caller_service", None)
        match = st.session_state.get("match_service")
        if match is not None and not match.configure(
            difficulty=difficulty, win_conditions=conditions
        ).accepted:
            st.sidebar.info("Match settings can change only before the first card or after the game ends.")
        st.rerun()


@st.fragment(run_every=REFRESH_SECONDS)
def live_panel(mode: str) -> None:
    get_clock().poll()
    settings = get_settings()
    if mode == "Caller":
        render_caller(get_caller_service(settings))
    else:
        render_match(get_match_service(settings))


def main() -> None:
    st.set_page_config(page_title="Lotería", layout="wide")
    st.title("Lotería")

    settings = get_settings()
    render_sidebar(settings)
    mode = st.radio("Mode", ["Caller", "Versus CPU"], horizontal=True)
    live_panel(mode)


if __name__ == "__main__":
    main()
