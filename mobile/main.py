import math
import os
import struct
import tempfile
import wave

from kivy.core.audio import SoundLoader
from kivy.core.window import Window
from kivy.lang import Builder
from kivy.clock import Clock
from kivy.metrics import dp
from kivy.utils import platform

from kivymd.app import MDApp
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.button import MDFlatButton, MDIconButton, MDRaisedButton
from kivymd.uix.dialog import MDDialog
from kivymd.uix.floatlayout import MDFloatLayout
from kivymd.uix.label import MDLabel
from kivymd.uix.list import OneLineListItem, TwoLineListItem
from kivymd.uix.menu import MDDropdownMenu
from kivymd.uix.progressbar import MDProgressBar
from kivymd.uix.screen import MDScreen
from kivymd.uix.selectioncontrol import MDCheckbox
from kivymd.uix.snackbar import Snackbar
from kivymd.uix.tab import MDTabsBase
from kivymd.uix.textfield import MDTextField
from kivy.properties import StringProperty

from api import build_context, build_registry, build_controller
from client.auth import AuthError
from client.dashboard import View
from client.evolution import format_number, format_workouts
from client.logging_session import SessionState
from app.models.log import DEFAULT_RATING, RATINGS


class LoginScreen(MDScreen):
    pass


class DashboardScreen(MDScreen):
    pass


class TabTreinar(MDFloatLayout, MDTabsBase):
    title = StringProperty("Treinar")
    icon = StringProperty("dumbbell")


class TabNovoPlano(MDFloatLayout, MDTabsBase):
    title = StringProperty("Plano")
    icon = StringProperty("clipboard-list")


class TabHistorico(MDFloatLayout, MDTabsBase):
    title = StringProperty("Histórico")
    icon = StringProperty("history")


class TabEvolucao(MDFloatLayout, MDTabsBase):
    title = StringProperty("Evolução")
    icon = StringProperty("chart-bar")


TAB_VIEWS = {
    "Treinar": View.LOGGER,
    "Plano": View.CREATOR,
    "Histórico": View.HISTORY,
    "Evolução": View.EVOLUTION,
}


def _write_beep(path, frequency=880, seconds=0.5, rate=22050):
    # tom senoidal curto com decaimento, gerado uma vez por execução
    frames = bytearray()
    total = int(rate * seconds)
    for i in range(total):
        envelope = math.exp(-6 * i / total)
        sample = int(32767 * 0.5 * envelope * math.sin(2 * math.pi * frequency * i / rate))
        frames += struct.pack("<h", sample)
    with wave.open(path, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(rate)
        wav.writeframes(bytes(frames))


class KivyNotifier:
    def alert(self, message):
        Snackbar(text=message, duration=3).open()

    def confirm(self, message, on_confirm):
        dialog = None

        def _ok(*_):
            dialog.dismiss()
            on_confirm()

        dialog = MDDialog(
            text=message,
            buttons=[
                MDFlatButton(text="Cancelar", on_release=lambda *_: dialog.dismiss()),
                MDRaisedButton(text="Excluir", on_release=_ok),
            ],
        )
        dialog.open()


class PumpDiarioApp(MDApp):
    controller = None
    editor = None

    def build(self):
        # Desktop default size for dev
        if platform in ("win", "linux", "macosx"):
            Window.size = (420, 760)
        self.context = build_context()
        self.registry = build_registry(self.context)
        self.notifier = KivyNotifier()
        self._beep = None
        self._plan_menu = None
        self._feedback_dialog = None
        return Builder.load_file(os.path.join(os.path.dirname(__file__), "main.kv"))

    def on_start(self):
        if self.context.current_user:
            Clock.schedule_once(lambda dt: self.open_dashboard(self.context.current_user))
        # atualiza o mostrador do descanso e a mensagem de sucesso
        Clock.schedule_interval(lambda dt: self.refresh_rest(), 0.25)

    # ---------- login ----------

    def _login_ids(self):
        return self.root.get_screen("login").ids

    def login(self):
        self._authenticate(self.registry.login)

    def register(self):
        self._authenticate(self.registry.register)

    def _authenticate(self, action):
        ids = self._login_ids()
        ids.login_error.text = ""
        try:
            user = action(ids.login_username.text, ids.login_password.text)
        except AuthError as e:
            ids.login_error.text = str(e)
            return
        ids.login_password.text = ""
        self.open_dashboard(user)

    def logout(self):
        self.registry.logout()
        self.controller = None
        self.root.current = "login"

    def open_dashboard(self, user):
        self.controller = build_controller(
            user, self.context, Clock, self.notifier, self.play_beep
        )
        self.root.get_screen("dashboard").ids.toolbar.title = f"Pump Diário - {user}"
        self.root.current = "dashboard"
        self.render_all()

    # ---------- navegação ----------

    @property
    def dash(self):
        return self.root.get_screen("dashboard").ids

    def on_tab_switch(self, instance_tabs, instance_tab, instance_tab_label, tab_text):
        if self.controller is None:
            return
        view = TAB_VIEWS.get(tab_text, View.LOGGER)
        self.controller.change_view(view)
        self.render_all()

    def new_plan(self):
        if self.controller is None:
            return
        self.controller.new_plan()
        self.dash.tabs.switch_tab("Plano", search_by="title")
        self.render_creator()

    def render_all(self):
        self.render_logger()
        self.render_creator()
        self.render_history()
        self.render_evolution()

    # ---------- treino do dia ----------

    def play_beep(self):
        if self._beep is None:
            path = os.path.join(tempfile.gettempdir(), "pump_diario_beep.wav")
            if not os.path.exists(path):
                _write_beep(path)
            self._beep = SoundLoader.load(path)
        if self._beep is not None:
            self._beep.play()

    def open_plan_menu(self, caller):
        if self.controller is None or not self.controller.plans:
            self.notifier.alert("Nenhum plano encontrado. Crie um novo plano de treino!")
            return
        items = [
            {
                "viewclass": "OneLineListItem",
                "text": plan.name,
                "on_release": lambda plan_id=plan.id: self.select_plan(plan_id),
            }
            for plan in self.controller.plans
        ]
        self._plan_menu = MDDropdownMenu(caller=caller, items=items, width_mult=4)
        self._plan_menu.open()

    def select_plan(self, plan_id):
        if self._plan_menu is not None:
            self._plan_menu.dismiss()
        self.controller.session.select_plan(plan_id)
        self.render_logger()

    def edit_selected_plan(self):
        plan = self.controller.session.selected_plan if self.controller else None
        if plan is None:
            return
        self.controller.edit_plan(plan.id)
        self.dash.tabs.switch_tab("Plano", search_by="title")
        self.render_creator()

    def delete_selected_plan(self):
        plan = self.controller.session.selected_plan if self.controller else None
        if plan is None:
            return
        # redesenha só quando a exclusão confirmada terminar
        self.controller.request_delete_plan(plan.id, on_done=lambda ok: self.render_all())

    def render_logger(self):
        if self.controller is None:
            return
        session = self.controller.session
        ids = self.dash
        box = ids.logger_list
        box.clear_widgets()
        plan = session.selected_plan
        ids.plan_picker.text = plan.name if plan else "Escolher plano"
        ids.finish_button.disabled = plan is None
        if plan is None:
            box.add_widget(OneLineListItem(text="Selecione um plano de treino para começar."))
            return

        for ex in plan.exercises:
            row = MDBoxLayout(size_hint_y=None, height=dp(72), spacing=dp(4))
            check = MDCheckbox(size_hint_x=None, width=dp(40), active=session.is_completed(ex.id))
            check.bind(on_release=lambda _w, ex_id=ex.id: session.toggle_exercise(ex_id))
            done = session.sets_done.get(ex.id, 0)
            info = f"{ex.name}\n{ex.sets}x{ex.reps} | {ex.rest}"
            if done:
                info += f" | {done} série(s)"
            row.add_widget(check)
            row.add_widget(MDLabel(text=info))
            load = MDTextField(
                hint_text="Carga (kg)",
                text=session.loads.get(ex.id, ""),
                size_hint_x=None,
                width=dp(90),
                input_filter="float",
            )
            load.bind(text=lambda _w, value, ex_id=ex.id: session.set_load(ex_id, value))
            row.add_widget(load)
            row.add_widget(
                MDIconButton(
                    icon="timer-outline",
                    on_release=lambda _w, ex_id=ex.id: self.start_rest(ex_id),
                )
            )
            box.add_widget(row)

        if plan.cardio is not None:
            row = MDBoxLayout(size_hint_y=None, height=dp(72), spacing=dp(4))
            check = MDCheckbox(size_hint_x=None, width=dp(40), active=session.cardio_completed)
            check.bind(on_release=lambda _w: session.toggle_cardio())
            row.add_widget(check)
            row.add_widget(MDLabel(text=f"Cardio: {plan.cardio.type}"))
            for field_name, hint in (("duration", "Duração"), ("distance", "Km"), ("calories", "Kcal")):
                entry = MDTextField(
                    hint_text=hint,
                    text=session.cardio_actuals[field_name],
                    size_hint_x=None,
                    width=dp(64),
                )
                entry.bind(
                    text=lambda _w, value, name=field_name: session.set_cardio_actual(name, value)
                )
                row.add_widget(entry)
            box.add_widget(row)

    def start_rest(self, exercise_id):
        self.controller.session.start_rest(exercise_id)
        self.refresh_rest()

    def toggle_rest(self):
        if self.controller:
            self.controller.session.toggle_rest()

    def reset_rest(self):
        if self.controller:
            self.controller.session.reset_rest()

    def dismiss_rest(self):
        if self.controller:
            self.controller.session.dismiss_rest()
            self.refresh_rest()

    def refresh_rest(self):
        if self.controller is None:
            return
        session = self.controller.session
        ids = self.dash
        if session.state == SessionState.COMPLETED:
            ids.finish_button.text = "Treino Registrado com Sucesso!"
        else:
            ids.finish_button.text = "Registrar Treino"
        countdown = session.active_countdown
        if countdown is None:
            if ids.rest_label.text:
                ids.rest_label.text = ""
                # o descanso pode ter terminado sozinho: atualiza a contagem de séries
                self.render_logger()
            return
        exercise = session.find_exercise(countdown.exercise_id)
        name = exercise.name if exercise else ""
        ids.rest_label.text = f"Descanso {name}: {countdown.display}"

    def finish_workout(self):
        log = self.controller.session.finish()
        if log is None:
            return
        self.open_feedback()
        self.render_history()
        self.render_evolution()

    def open_feedback(self):
        session = self.controller.session
        chosen = {"rating": DEFAULT_RATING}
        content = MDBoxLayout(orientation="vertical", size_hint_y=None, height=dp(140))
        ratings = MDBoxLayout(size_hint_y=None, height=dp(48))
        rating_buttons = {}

        def _choose(value):
            chosen["rating"] = value
            for rating, button in rating_buttons.items():
                button.md_bg_color = (
                    self.theme_cls.primary_light if rating == value else (0, 0, 0, 0)
                )

        for rating in RATINGS:
            button = MDFlatButton(
                text=rating,
                on_release=lambda _w, value=rating: _choose(value),
            )
            rating_buttons[rating] = button
            ratings.add_widget(button)
        _choose(DEFAULT_RATING)
        comments = MDTextField(hint_text="Observações sobre o treino", multiline=True)
        content.add_widget(ratings)
        content.add_widget(comments)

        def _skip(*_):
            self._feedback_dialog.dismiss()
            session.skip_feedback()
            self._after_feedback()

        def _save(*_):
            self._feedback_dialog.dismiss()
            session.submit_feedback(comments.text, chosen["rating"])
            self._after_feedback()

        self._feedback_dialog = MDDialog(
            title="Como foi o treino?",
            type="custom",
            content_cls=content,
            auto_dismiss=False,
            buttons=[
                MDFlatButton(text="Pular", on_release=_skip),
                MDRaisedButton(text="Salvar e Finalizar", on_release=_save),
            ],
        )
        self._feedback_dialog.open()

    def _after_feedback(self):
        self.render_history()
        # depois da mensagem de sucesso a sessão volta limpa
        Clock.schedule_once(
            lambda dt: self.render_logger(),
            self.controller.session.success_seconds + 0.1,
        )

    # ---------- criação de plano ----------

    def render_creator(self):
        if self.controller is None:
            return
        if self.editor is None or self.editor.plan_to_edit is not self.controller.plan_to_edit:
            self.editor = self.controller.editor()
        editor = self.editor
        form = self.dash.creator_form
        form.clear_widgets()

        name = MDTextField(hint_text="Nome do Plano de Treino", text=editor.name)
        name.bind(text=lambda _w, value: setattr(editor, "name", value))
        form.add_widget(name)

        labels = (
            ("muscle", "Músculo"),
            ("name", "Nome do Exercício"),
            ("sets", "Séries"),
            ("reps", "Repetições"),
            ("rest", "Descanso"),
            ("method", "Método"),
            ("notes", "Observações"),
        )
        for index, draft in enumerate(editor.exercises, start=1):
            form.add_widget(MDLabel(text=f"Exercício {index}", size_hint_y=None, height=dp(32)))
            for field_name, hint in labels:
                entry = MDTextField(hint_text=hint, text=getattr(draft, field_name))
                entry.bind(
                    text=lambda _w, value, tid=draft.temp_id, f=field_name: editor.update_exercise(tid, f, value)
                )
                form.add_widget(entry)
            if len(editor.exercises) > 1:
                form.add_widget(
                    MDFlatButton(
                        text="Remover exercício",
                        on_release=lambda _w, tid=draft.temp_id: self._remove_exercise(tid),
                    )
                )

        form.add_widget(MDFlatButton(text="Adicionar exercício", on_release=lambda _w: self._add_exercise()))

        form.add_widget(MDLabel(text="Cardio (opcional)", size_hint_y=None, height=dp(32)))
        for field_name, hint in (
            ("type", "Tipo de Cardio"),
            ("duration", "Duração Planejada"),
            ("distance", "Distância Planejada (km)"),
            ("calories", "Calorias"),
        ):
            entry = MDTextField(hint_text=hint, text=editor.cardio[field_name])
            entry.bind(text=lambda _w, value, f=field_name: editor.update_cardio(f, value))
            form.add_widget(entry)

        form.add_widget(
            MDRaisedButton(
                text="Salvar Alterações" if editor.is_editing else "Salvar Plano",
                on_release=lambda _w: self.save_plan(),
            )
        )

    def _add_exercise(self):
        self.editor.add_exercise()
        self.render_creator()

    def _remove_exercise(self, temp_id):
        self.editor.remove_exercise(temp_id)
        self.render_creator()

    def save_plan(self):
        if not self.editor.submit():
            return
        self.editor = None
        self.dash.tabs.switch_tab("Treinar", search_by="title")
        self.render_all()

    # ---------- histórico ----------

    def render_history(self):
        if self.controller is None:
            return
        box = self.dash.history_list
        box.clear_widgets()
        entries = self.controller.history()
        if not entries:
            box.add_widget(OneLineListItem(text="Nenhum treino registrado ainda."))
            return
        view = self.controller.history_view
        for entry in entries:
            item = TwoLineListItem(
                text=f"{entry.title} {entry.log.rating or ''}",
                secondary_text=entry.date_label,
                on_release=lambda _w, log_id=entry.log.id: self._toggle_history(log_id),
            )
            box.add_widget(item)
            if not view.is_expanded(entry.log.id):
                continue
            if entry.plan_missing:
                lines = ["Plano de treino não encontrado."]
            else:
                lines = entry.exercise_lines()
                cardio = entry.cardio_line()
                if cardio:
                    lines.append(cardio)
                if entry.log.comments:
                    lines.append(f"Obs: {entry.log.comments}")
                if entry.nothing_completed:
                    lines.append("Nenhum exercício foi marcado como concluído neste treino.")
            for line in lines:
                box.add_widget(OneLineListItem(text=line))

    def _toggle_history(self, log_id):
        self.controller.history_view.toggle(log_id)
        self.render_history()

    # ---------- evolução ----------

    def render_evolution(self):
        if self.controller is None:
            return
        box = self.dash.evolution_box
        box.clear_widgets()
        report = self.controller.evolution()
        if report.is_empty:
            box.add_widget(MDLabel(text="Registre alguns treinos para acompanhar sua evolução."))
            return
        charts = (
            ("Treinos por Mês", report.monthly_workouts, format_workouts),
            ("Exercícios por Grupo Muscular", report.muscle_groups, format_number),
            ("Duração Total de Cardio (minutos)", report.cardio_duration, format_number),
            ("Distância Total de Cardio (km)", report.cardio_distance, format_number),
        )
        for title, points, formatter in charts:
            if not points:
                continue
            box.add_widget(MDLabel(text=title, font_style="H6", size_hint_y=None, height=dp(40)))
            top = max(p.count for p in points) or 1
            for point in points:
                box.add_widget(
                    MDLabel(
                        text=f"{point.name}: {formatter(point.count)}",
                        size_hint_y=None,
                        height=dp(24),
                    )
                )
                box.add_widget(
                    MDProgressBar(value=point.count / top * 100, size_hint_y=None, height=dp(8))
                )


if __name__ == "__main__":
    PumpDiarioApp().run()
