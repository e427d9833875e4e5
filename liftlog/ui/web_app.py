"""NiceGUI web UI for LiftLog."""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast

from fastapi import Request
from nicegui import app, ui

from liftlog.auth.memory import SimulatedAuth
from liftlog.auth.provider import IdentityProvider
from liftlog.auth.supabase import SupabaseAuth
from liftlog.core.config import AppConfig
from liftlog.ui.controller import UIController
from liftlog.workout.deletion import ActiveWorkoutSetDeletionError
from liftlog.workout.library import list_templates
from liftlog.workout.model import EQUIPMENT_KINDS, Exercise, WorkoutSet
from liftlog.workout.session import CompletionRejectedError
from liftlog.workout.summary import WorkoutSummary, format_elapsed, format_weight

REFRESH_SEC = 0.5
REDIRECT_DELAY_SEC = 1.0
LOGOUT_REDIRECT_SEC = 3.0
CALLBACK_KEYS = ("token_hash", "access_token", "error", "error_description")

HEAD_HTML = """
<style>
  :root {
    --ll-bg: #f9fafb;
    --ll-surface: #ffffff;
    --ll-accent: #16a34a;
    --ll-muted: #6b7280;
  }
  body {
    background: var(--ll-bg);
    font-family: Arial, "Segoe UI", sans-serif;
  }
  .ll-card {
    background: var(--ll-surface);
    border: 1px solid rgba(148, 163, 184, 0.35);
    border-radius: 14px;
    box-shadow: 0 8px 18px rgba(15, 23, 42, 0.08);
  }
  .ll-muted { color: var(--ll-muted); }
  .ll-accent { color: var(--ll-accent); font-weight: 700; }
  .ll-timer { font-variant-numeric: tabular-nums; font-size: 1.4rem; font-weight: 700; }
  .ll-done { text-decoration: line-through; color: var(--ll-muted); }
</style>
"""


def _today_label() -> str:
    now = datetime.now()
    return f"{now:%a}, {now:%b} {now.day}, {now.year}"


def _equipment_options() -> dict[str, str]:
    return {kind: ("Other..." if kind == "Other" else kind) for kind in EQUIPMENT_KINDS}


def _header(title: str = "Workout Tracker") -> None:
    with ui.row().classes("w-full items-center justify-between px-4 py-2"):
        with ui.link(target="/").classes("no-underline"):
            ui.label(title).classes("text-lg font-semibold ll-accent")


def run_web_ui(config: AppConfig) -> int:
    auth_by_browser: dict[str, IdentityProvider] = {}

    def auth_for_browser() -> IdentityProvider:
        browser_id = str(app.storage.browser["id"])
        provider = auth_by_browser.get(browser_id)
        if provider is None:
            if config.simulate_auth:
                provider = SimulatedAuth()
            else:
                provider = SupabaseAuth(config.supabase_url, config.supabase_anon_key)
            auth_by_browser[browser_id] = provider
        return provider

    def new_controller() -> UIController:
        controller = UIController(auth_for_browser(), callback_url=config.callback_url)
        ui.context.client.on_disconnect(controller.close)
        return controller

    @ui.page("/")
    def index_page() -> None:
        ui.add_head_html(HEAD_HTML)
        _header()
        with ui.column().classes("w-full items-center gap-4 py-10"):
            ui.label("Workout Discipline Tracker").classes("text-3xl font-bold")
            ui.label("Build strength, track progress, achieve goals.").classes("ll-muted")
            with ui.row().classes("gap-2"):
                ui.button("Sign In", on_click=lambda: ui.navigate.to("/login")).props("outline")
                ui.button("Create Account", on_click=lambda: ui.navigate.to("/register"))
                ui.button("Track Progress", on_click=lambda: ui.navigate.to("/track-progress")).props(
                    "flat"
                )
            with ui.grid().classes("grid-cols-1 md:grid-cols-3 gap-3 max-w-4xl"):
                for title, text in (
                    ("Simple Tracking", "Track your workouts with an intuitive, easy-to-use interface"),
                    ("Workout Timer", "Time your workouts while you tick off every set"),
                    ("Notes & Equipment", "Add notes and equipment to each exercise"),
                ):
                    with ui.card().classes("ll-card"):
                        ui.label(title).classes("text-lg font-semibold")
                        ui.label(text).classes("ll-muted text-sm")

    @ui.page("/login")
    async def login_page(request: Request) -> None:
        ui.add_head_html(HEAD_HTML)
        controller = new_controller()
        _header()
        params = dict(request.query_params)

        with ui.card().classes("ll-card max-w-md w-full mx-auto p-6"):
            ui.label("Sign In").classes("text-2xl font-semibold")
            ui.label("Welcome back! Sign in to continue.").classes("ll-muted")
            with ui.column().classes("w-full gap-2") as form_view:
                email_input = ui.input("Email", placeholder="you@example.com").classes("w-full")
                send_btn = ui.button("Send Magic Link").classes("w-full")
            with ui.column().classes("w-full gap-2") as sent_view:
                sent_label = ui.label("").classes("text-sm")
                again_btn = ui.button("Use a different email").props("flat")
            error_label = ui.label("").classes("text-sm text-red-700")
            message_label = ui.label("").classes("text-sm text-green-700")
            ui.link("Don't have an account? Sign up", "/register").classes("text-sm")
        sent_view.set_visibility(False)

        def show_form() -> None:
            form_view.set_visibility(True)
            sent_view.set_visibility(False)

        async def on_send() -> None:
            error_label.text = ""
            message_label.text = ""
            send_btn.disable()
            try:
                outcome = await controller.request_login(str(email_input.value or ""))
            finally:
                send_btn.enable()
            if outcome.ok:
                sent_label.text = f"We've sent a magic link to {email_input.value}. {outcome.message}"
                form_view.set_visibility(False)
                sent_view.set_visibility(True)
            else:
                error_label.text = outcome.message or "Failed to send magic link"

        send_btn.on_click(on_send)
        again_btn.on_click(show_form)

        if any(params.get(key) for key in CALLBACK_KEYS):
            outcome = await controller.handle_callback(params)
            if outcome.ok:
                message_label.text = outcome.message
                ui.timer(REDIRECT_DELAY_SEC, lambda: ui.navigate.to("/track-progress"), once=True)
            else:
                error_label.text = outcome.message

    @ui.page("/register")
    def register_page() -> None:
        ui.add_head_html(HEAD_HTML)
        controller = new_controller()
        _header()

        with ui.card().classes("ll-card max-w-md w-full mx-auto p-6"):
            ui.label("Create Account").classes("text-2xl font-semibold")
            ui.label("Join Workout Discipline Tracker to start your fitness journey.").classes(
                "ll-muted"
            )
            name_input = ui.input("Full Name").classes("w-full")
            email_input = ui.input("Email", placeholder="you@example.com").classes("w-full")
            terms_checkbox = ui.checkbox("I accept the terms and conditions")
            submit_btn = ui.button("Create Account").classes("w-full")
            error_label = ui.label("").classes("text-sm text-red-700")
            message_label = ui.label("").classes("text-sm text-green-700")
            ui.link("Already have an account? Sign in", "/login").classes("text-sm")

        async def on_submit() -> None:
            error_label.text = ""
            message_label.text = ""
            submit_btn.disable()
            try:
                outcome = await controller.register(
                    str(name_input.value or ""),
                    str(email_input.value or ""),
                    bool(terms_checkbox.value),
                )
            finally:
                submit_btn.enable()
            if outcome.ok:
                message_label.text = (
                    "Registration successful! Check your email for a magic link to log in."
                )
            else:
                error_label.text = outcome.message or "Failed to register. Please try again."

        submit_btn.on_click(on_submit)

    @ui.page("/auth/callback")
    async def callback_page(request: Request) -> None:
        ui.add_head_html(HEAD_HTML)
        controller = new_controller()
        _header()
        params = dict(request.query_params)
        status_label = ui.label("Checking authentication...").classes("text-lg mx-auto")

        if not any(params.get(key) for key in CALLBACK_KEYS):
            # Implicit-flow tokens arrive in the fragment, which never reaches the server.
            await ui.context.client.connected()
            ui.run_javascript(
                "if (window.location.hash.length > 1) {"
                " window.location.replace(window.location.pathname + '?' +"
                " window.location.hash.substring(1)); }"
            )

        outcome = await controller.handle_callback(params)
        status_label.text = outcome.message
        if outcome.ok:
            ui.timer(REDIRECT_DELAY_SEC, lambda: ui.navigate.to("/track-progress"), once=True)
        else:
            ui.link("Back to sign in", "/login").classes("mx-auto")

    @ui.page("/logout")
    async def logout_page() -> None:
        ui.add_head_html(HEAD_HTML)
        controller = new_controller()
        _header()
        with ui.card().classes("ll-card max-w-md w-full mx-auto p-6 items-center"):
            title_label = ui.label("Signing Out...").classes("text-2xl font-semibold")
            info_label = ui.label("Please wait while we securely log you out.").classes("ll-muted")
        try:
            await controller.sign_out()
            title_label.text = "You've Been Logged Out"
            info_label.text = "Thanks for using Workout Discipline Tracker. Redirecting to home page..."
        finally:
            ui.timer(LOGOUT_REDIRECT_SEC, lambda: ui.navigate.to("/"), once=True)

    @ui.page("/track-progress")
    async def track_progress_page() -> None:
        ui.add_head_html(HEAD_HTML)
        controller = new_controller()
        if not await controller.is_signed_in():
            ui.navigate.to("/login")
            return
        _build_tracker_view(controller)

    ui.run(
        host=config.host,
        port=config.port,
        reload=False,
        title="LiftLog",
        storage_secret=config.storage_secret,
    )
    return 0


def _build_tracker_view(controller: UIController) -> None:
    templates = list_templates()

    with ui.row().classes("w-full items-center justify-between px-4 py-2"):
        ui.label("Workout Tracker").classes("text-lg font-semibold ll-accent")
        ui.button("Sign out", on_click=lambda: ui.navigate.to("/logout")).props("outline")

    with ui.card().classes("w-full ll-card"):
        with ui.row().classes("w-full items-center gap-4 flex-wrap"):
            status_label = ui.label("No active workout").classes("text-sm font-semibold")
            timer_label = ui.label("0:00").classes("ll-timer")
            start_btn = ui.button("Start workout").props("color=positive")
            finish_btn = ui.button("Finish workout").props("color=negative")
            finish_btn.disable()

    with ui.row().classes("w-full items-end gap-2"):
        tabs_row = ui.row().classes("items-center gap-2")
        new_set_btn = ui.button("New workout").props("outline")
        template_select = ui.select(
            {item.key: item.name for item in templates},
            value=templates[0].key if templates else None,
            label="Template",
        ).classes("min-w-[180px]")
        template_btn = ui.button("Add from template").props("flat")

    routine_container = ui.column().classes("w-full gap-3")

    with ui.dialog() as deletion_dialog, ui.card():
        deletion_label = ui.label("")
        with ui.row().classes("w-full justify-end gap-2"):
            cancel_delete_btn = ui.button("Cancel").props("outline")
            confirm_delete_btn = ui.button("Delete").props("color=negative")

    with ui.dialog() as equipment_dialog, ui.card():
        ui.label("Enter custom equipment type:")
        equipment_input = ui.input("Equipment").classes("w-full")
        with ui.row().classes("w-full justify-end gap-2"):
            equipment_cancel_btn = ui.button("Cancel").props("outline")
            equipment_ok_btn = ui.button("OK")
    equipment_target: dict[str, str] = {}

    with ui.dialog().props("persistent") as summary_dialog, ui.card().classes("min-w-[340px]"):
        summary_container = ui.column().classes("w-full gap-2")
        with ui.row().classes("w-full gap-2"):
            summary_close_btn = ui.button("Close").props("outline")
            summary_save_btn = ui.button("Save").props("color=positive")

    def notify_rejection(message: str) -> None:
        ui.notify(message, type="warning", position="center", close_button="OK")

    def refresh_ui() -> None:
        session = controller.session
        active_id = session.active_workout_set_id
        timer_label.text = format_elapsed(session.elapsed_seconds)
        if active_id is None:
            status_label.text = "No active workout"
            start_btn.enable()
            finish_btn.disable()
        else:
            active = controller.store.get(active_id)
            name = active.name if active else "deleted workout"
            status_label.text = f"In progress: {name}"
            start_btn.disable()
            finish_btn.enable()

    def render_tabs() -> None:
        tabs_row.clear()
        selected_id = controller.store.selected_id
        with tabs_row:
            for workout_set in controller.workout_sets:
                label = workout_set.name or "Untitled"
                if controller.session.is_active(workout_set.id):
                    label += " (active)"
                btn = ui.button(label).props(
                    "unelevated" if workout_set.id == selected_id else "outline"
                )

                def on_pick(picked_id: str = workout_set.id) -> None:
                    controller.select(picked_id)
                    render_all()

                btn.on_click(on_pick)

    def render_entry_row(workout_set: WorkoutSet, exercise: Exercise, entry_id: str) -> None:
        entry = exercise.find_entry(entry_id)
        if entry is None:
            return
        with ui.row().classes("w-full items-center gap-2"):
            ui.label(f"Set {entry.set_number}").classes(
                "w-14 text-sm" + (" ll-done" if entry.completed else "")
            )
            weight_input = ui.number("lb", value=entry.weight, min=0).classes("w-24")
            reps_input = ui.number("Reps", value=entry.reps, min=1, precision=0).classes("w-20")
            done_checkbox = ui.checkbox("Done", value=entry.completed)
            remove_btn = ui.button(icon="close").props("flat dense round")

        def on_weight(e: Any) -> None:
            controller.update_set_entry(workout_set.id, exercise.id, entry.id, "weight", e.value)

        def on_reps(e: Any) -> None:
            controller.update_set_entry(workout_set.id, exercise.id, entry.id, "reps", e.value)

        def on_done() -> None:
            try:
                controller.toggle_completion(workout_set.id, exercise.id, entry.id)
            except CompletionRejectedError as exc:
                notify_rejection(str(exc))
            render_all()

        def on_remove() -> None:
            controller.remove_set_entry(workout_set.id, exercise.id, entry.id)
            render_all()

        weight_input.on_value_change(on_weight)
        reps_input.on_value_change(on_reps)
        done_checkbox.on_value_change(lambda _: on_done())
        remove_btn.on_click(on_remove)

    def render_exercise(workout_set: WorkoutSet, exercise: Exercise) -> None:
        with ui.card().classes("w-full ll-card"):
            with ui.row().classes("w-full items-end gap-2"):
                name_input = ui.input("Exercise", value=exercise.name).classes("w-1/3")
                equipment_value = exercise.equipment.kind if exercise.equipment else None
                equipment_select = ui.select(
                    _equipment_options(),
                    value=equipment_value,
                    label="Equipment",
                    clearable=True,
                ).classes("min-w-[150px]")
                if exercise.equipment and exercise.equipment.kind == "Other":
                    ui.badge(exercise.equipment.label).props("outline")
                delete_btn = ui.button(icon="delete").props("flat round color=negative")
            notes_input = ui.input("Notes", value=exercise.notes or "").classes("w-full")
            for entry in exercise.entries:
                render_entry_row(workout_set, exercise, entry.id)
            add_entry_btn = ui.button("Add set").props("flat")

        def on_name(e: Any) -> None:
            controller.rename_exercise(workout_set.id, exercise.id, str(e.value or ""))

        def on_equipment(e: Any) -> None:
            if e.value == "Other":
                equipment_target.clear()
                equipment_target.update(set_id=workout_set.id, exercise_id=exercise.id)
                equipment_input.value = (
                    exercise.equipment.label
                    if exercise.equipment and exercise.equipment.kind == "Other"
                    else ""
                )
                equipment_dialog.open()
                return
            controller.set_equipment(workout_set.id, exercise.id, cast(str | None, e.value))

        def on_notes(e: Any) -> None:
            controller.set_notes(workout_set.id, exercise.id, str(e.value or ""))

        def on_delete() -> None:
            controller.request_exercise_deletion(workout_set.id, exercise.id)
            deletion_label.text = (
                f"Delete exercise '{exercise.name or 'Untitled'}'? This cannot be undone."
            )
            deletion_dialog.open()

        def on_add_entry() -> None:
            controller.add_set_entry(workout_set.id, exercise.id)
            render_all()

        name_input.on_value_change(on_name)
        equipment_select.on_value_change(on_equipment)
        notes_input.on_value_change(on_notes)
        delete_btn.on_click(on_delete)
        add_entry_btn.on_click(on_add_entry)

    def render_routine() -> None:
        routine_container.clear()
        workout_set = controller.selected
        if workout_set is None:
            return
        with routine_container:
            with ui.row().classes("w-full items-end gap-2"):
                set_name_input = ui.input("Workout name", value=workout_set.name).classes("w-1/2")
                add_exercise_btn = ui.button("Add exercise")
                delete_set_btn = ui.button("Delete workout").props("flat color=negative")
                delete_set_btn.set_visibility(controller.store.can_remove_workout_sets)
            if not workout_set.exercises:
                ui.label("No exercises yet.").classes("ll-muted")
            for exercise in workout_set.exercises:
                render_exercise(workout_set, exercise)

        def on_set_name(e: Any) -> None:
            controller.rename_workout_set(workout_set.id, str(e.value or ""))

        def on_add_exercise() -> None:
            controller.add_exercise(workout_set.id)
            render_all()

        def on_delete_set() -> None:
            try:
                pending = controller.request_workout_set_deletion(workout_set.id)
            except ActiveWorkoutSetDeletionError as exc:
                notify_rejection(str(exc))
                return
            if pending is None:
                return
            deletion_label.text = (
                f"Delete workout '{workout_set.name or 'Untitled'}'? This cannot be undone."
            )
            deletion_dialog.open()

        set_name_input.on("blur", lambda _: render_tabs())
        set_name_input.on_value_change(on_set_name)
        add_exercise_btn.on_click(on_add_exercise)
        delete_set_btn.on_click(on_delete_set)

    def render_all() -> None:
        render_tabs()
        render_routine()
        refresh_ui()

    def render_summary(summary: WorkoutSummary) -> None:
        summary_container.clear()
        with summary_container:
            ui.label("Workout Complete!").classes("text-xl font-bold")
            ui.label(_today_label()).classes("text-xs ll-muted")
            with ui.row().classes("w-full justify-center gap-4 text-sm"):
                ui.label(format_elapsed(summary.duration_seconds))
                ui.label(f"{format_weight(summary.total_weight_moved)}lb")
                ui.label(f"{summary.total_sets} sets / {summary.total_reps} reps")
            if summary.exercises:
                with ui.row().classes("w-full justify-between ll-muted text-xs"):
                    ui.label("Exercise")
                    ui.label("Sets X Reps X Weight")
                for item in summary.exercises:
                    with ui.row().classes("w-full justify-between items-center"):
                        with ui.row().classes("items-center gap-1"):
                            ui.label(item.name or "Untitled").classes("font-medium")
                            if item.equipment_label:
                                ui.badge(item.equipment_label).props("outline")
                        ui.label(item.formatted).classes("text-sm")
            else:
                ui.label("No sets were completed.").classes("ll-muted")

    def on_start() -> None:
        selected_id = controller.store.selected_id
        if selected_id is None:
            return
        if not controller.start_workout(selected_id):
            notify_rejection("Finish your current workout before starting another one.")
        render_all()

    def on_finish() -> None:
        summary = controller.finish_workout()
        render_all()
        if summary is None:
            return
        render_summary(summary)
        summary_dialog.open()

    def on_summary_close() -> None:
        controller.dismiss_summary()
        summary_dialog.close()

    def on_summary_save() -> None:
        message = controller.save_summary()
        summary_dialog.close()
        if message:
            ui.notify(message, color="positive")

    def on_new_set() -> None:
        controller.add_workout_set()
        render_all()

    def on_add_template() -> None:
        if template_select.value:
            controller.add_workout_set(str(template_select.value))
            render_all()

    def on_cancel_delete() -> None:
        controller.cancel_deletion()
        deletion_dialog.close()

    def on_confirm_delete() -> None:
        try:
            controller.confirm_deletion()
        except ActiveWorkoutSetDeletionError as exc:
            notify_rejection(str(exc))
        deletion_dialog.close()
        render_all()

    def on_equipment_ok() -> None:
        text = str(equipment_input.value or "").strip()
        if text and equipment_target:
            controller.set_equipment(
                equipment_target["set_id"],
                equipment_target["exercise_id"],
                text,
            )
        equipment_dialog.close()
        render_all()

    def on_equipment_cancel() -> None:
        equipment_dialog.close()
        render_all()

    start_btn.on_click(on_start)
    finish_btn.on_click(on_finish)
    new_set_btn.on_click(on_new_set)
    template_btn.on_click(on_add_template)
    cancel_delete_btn.on_click(on_cancel_delete)
    confirm_delete_btn.on_click(on_confirm_delete)
    equipment_ok_btn.on_click(on_equipment_ok)
    equipment_cancel_btn.on_click(on_equipment_cancel)
    summary_close_btn.on_click(on_summary_close)
    summary_save_btn.on_click(on_summary_save)
    deletion_dialog.on("hide", lambda _: controller.cancel_deletion())

    render_all()
    ui.timer(REFRESH_SEC, refresh_ui)
