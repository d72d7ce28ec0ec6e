import logging
import os
import tkinter as tk
from datetime import datetime
from tkinter import messagebox, ttk

from analytics import generate_report
from game_logic import Board, Difficulty, Lost, Won
from highscore import LeaderboardError, ScoreStore, query
from mapper import cell_origin, cells_that_fit, map_pointer
from settings import get_leaderboard_dir, get_leaderboard_path

logger = logging.getLogger(__name__)

CONTROL_MASK = 0x0004


class HighScorePanel:
    COLUMNS = (
        ("rank", "#", 50, tk.CENTER),
        ("difficulty", "Difficulty", 120, tk.W),
        ("time", "Time (s)", 80, tk.CENTER),
    )

    def __init__(self, parent, panel_bg, score_store, max_rows=25):
        self.score_store = score_store
        self.panel_bg = panel_bg
        self.max_rows = max_rows
        self.frame = tk.Frame(parent, bg=self.panel_bg)
        self.info_label = None
        self.tree = None
        self.build_widgets()

    def build_widgets(self):
        title = tk.Label(self.frame, text="Best Times", bg=self.panel_bg, fg="#111827", font=("Segoe UI", 14, "bold"))
        title.pack(fill=tk.X, padx=12, pady=(12, 6))

        self.tree = ttk.Treeview(self.frame, columns=[col[0] for col in self.COLUMNS], show="headings", height=12)
        for name, heading, width, anchor in self.COLUMNS:
            self.tree.heading(name, text=heading)
            self.tree.column(name, width=width, anchor=anchor)
        self.tree.tag_configure("highlight", background="#FEF3C7")
        self.tree.pack(fill=tk.BOTH, expand=True, padx=12, pady=(0, 8))

        self.info_label = tk.Label(self.frame, text="No scores yet.", bg=self.panel_bg, fg="#6B7280", anchor="w")
        self.info_label.pack(fill=tk.X, padx=12, pady=(0, 6))

    def refresh(self, difficulty, highlight=None):
        for row in self.tree.get_children():
            self.tree.delete(row)
        if self.score_store is None:
            self.info_label.config(text="Leaderboard unavailable.")
            return

        scores = query(self.score_store.load(), difficulty)
        if not scores:
            self.info_label.config(text=f"No {difficulty.label} wins yet.")
            return

        for idx, score in enumerate(scores[: self.max_rows], start=1):
            tags = ("highlight",) if highlight is not None and score.as_line() == highlight.as_line() else ()
            self.tree.insert("", "end", values=(idx, score.difficulty.label, score.seconds), tags=tags)
        self.info_label.config(text=f"Showing top {min(self.max_rows, len(scores))} of {len(scores)} {difficulty.label} wins.")


class Minesweeper:
    NUMBER_COLORS = {1: "blue", 2: "green", 3: "red", 4: "purple", 5: "brown", 6: "teal", 7: "black", 8: "gray"}

    CELL_BG = "#E5E7EB"
    REVEALED_BG = "#F3F4F6"
    MINE_BG = "#FCA5A5"
    FIRE_BG = "#F97316"
    BOARD_BG = "#F8FAFC"
    PANEL_BG = "#FFFFFF"
    CELL_PX = 28
    TICK_MS = 60

    def __init__(self, root, difficulty=Difficulty.MEDIUM, score_store=None):
        self.root = root
        self.difficulty = difficulty
        self.score_store = score_store
        self.board = None
        self.last_score = None
        self.timer_job = None
        self.anim_job = None

        self._build_ui()
        self.new_game()

    def _build_ui(self):
        self.root.configure(bg=self.BOARD_BG)
        self.root.geometry("1200x720")

        self.main_frame = tk.Frame(self.root, bg=self.BOARD_BG)
        self.main_frame.pack(fill=tk.BOTH, expand=True, padx=10, pady=10)

        self.side_panel = tk.Frame(self.main_frame, bg=self.PANEL_BG, bd=1, relief=tk.SOLID, width=260)
        self.side_panel.pack(side=tk.LEFT, fill=tk.Y)
        self.side_panel.pack_propagate(False)

        counter_font = ("Consolas", 14, "bold")
        ui_font = ("Segoe UI", 11)
        self.mines_label = tk.Label(self.side_panel, text="Mines: 000", font=counter_font, bg=self.PANEL_BG, fg="#EF4444")
        self.mines_label.pack(fill=tk.X, padx=10, pady=(10, 10), anchor="w")
        self.timer_label = tk.Label(self.side_panel, text="Time: 000", font=counter_font, bg=self.PANEL_BG, fg="#111827")
        self.timer_label.pack(fill=tk.X, padx=10, pady=(0, 10), anchor="w")
        self.difficulty_label = tk.Label(self.side_panel, text="", font=ui_font, bg=self.PANEL_BG)
        self.difficulty_label.pack(fill=tk.X, padx=10, pady=(0, 10), anchor="w")

        tk.Button(self.side_panel, text="New Game", font=ui_font, command=self.new_game).pack(fill=tk.X, padx=10, pady=(0, 8))
        tk.Button(self.side_panel, text="Next Difficulty", font=ui_font, command=self.cycle_difficulty).pack(fill=tk.X, padx=10, pady=(0, 8))
        tk.Button(self.side_panel, text="Run Analytics", font=ui_font, command=self.run_analytics_report).pack(fill=tk.X, padx=10, pady=(0, 8))

        self.notebook = ttk.Notebook(self.main_frame)
        self.notebook.pack(side=tk.LEFT, padx=(10, 0), fill=tk.BOTH, expand=True)

        self.canvas = tk.Canvas(self.notebook, bg=self.BOARD_BG, highlightthickness=0)
        self.notebook.add(self.canvas, text="Game")
        self.highscore_panel = HighScorePanel(self.notebook, self.PANEL_BG, self.score_store)
        self.notebook.add(self.highscore_panel.frame, text="Best Times")

        self.status = tk.Label(
            self.root,
            text="Left: reveal, Ctrl+Left: chord, Middle: ?, Right: flag. R: new game, C: difficulty, Q: quit.",
            bg=self.BOARD_BG, fg="#374151", font=ui_font,
        )
        self.status.pack(padx=10, pady=(0, 6), anchor="w")

        self.canvas.bind("<ButtonRelease-1>", self._on_left)
        self.canvas.bind("<ButtonRelease-2>", self._on_middle)
        self.canvas.bind("<ButtonRelease-3>", self._on_right)
        self.canvas.bind("<Configure>", self._on_resize)
        for key, action in (("r", self.new_game), ("c", self.cycle_difficulty), ("q", self.root.destroy)):
            self.root.bind(f"<{key}>", lambda e, action=action: action())
            self.root.bind(f"<{key.upper()}>", lambda e, action=action: action())

    def new_game(self):
        self._stop_jobs()
        self.board = Board(self.difficulty, render_size=self._render_size(), on_win=self._on_win)
        self.last_score = None
        self.difficulty_label.config(text=f"Difficulty: {self.difficulty.label}")
        self.highscore_panel.refresh(self.difficulty)
        self.notebook.select(self.canvas)
        self._redraw()

    def cycle_difficulty(self):
        self.difficulty = self.difficulty.next()
        self.new_game()

    def _render_size(self):
        width, height = self.canvas.winfo_width(), self.canvas.winfo_height()
        if width <= 1 or height <= 1:
            return None
        return cells_that_fit((width, height), self.CELL_PX)

    def _origin(self):
        board_w = self.board.width * self.CELL_PX + 2
        board_h = self.board.height * self.CELL_PX + 2
        return (max(0, (self.canvas.winfo_width() - board_w) // 2),
                max(0, (self.canvas.winfo_height() - board_h) // 2))

    def _cell_at(self, event):
        return map_pointer((event.x, event.y), self._origin(), self.CELL_PX, (self.board.width, self.board.height))

    def _dispatch(self, event, action):
        pos = self._cell_at(event)
        if pos is None:
            return
        was_over = self.board.is_over
        action(*pos)
        if self.board.first_move_time is not None and self.timer_job is None and not self.board.is_over:
            self._start_timer()
        self._redraw()
        if not was_over and self.board.is_over:
            self._game_over()

    def _on_left(self, event):
        if event.state & CONTROL_MASK:
            self._dispatch(event, self.board.chord_click)
        else:
            self._dispatch(event, self.board.left_click)

    def _on_middle(self, event):
        self._dispatch(event, self.board.middle_click)

    def _on_right(self, event):
        self._dispatch(event, self.board.right_click)

    def _on_resize(self, _event):
        if self.board is None:
            return
        self.board.resize(self._render_size())
        self._redraw()

    def _redraw(self):
        self.canvas.delete("all")
        origin = self._origin()
        font = ("Segoe UI", max(8, int(self.CELL_PX * 0.45)), "bold")
        for y, row in enumerate(self.board.rows()):
            for x, view in enumerate(row):
                x0, y0 = cell_origin(x, y, origin, self.CELL_PX)
                x1, y1 = x0 + self.CELL_PX - 1, y0 + self.CELL_PX - 1
                bg = self.CELL_BG
                text, fg = "", "#111827"
                if view.kind == "mine":
                    bg, text = self.MINE_BG, "*"
                elif view.kind in ("empty", "number"):
                    bg = self.REVEALED_BG
                    if view.kind == "number":
                        text, fg = str(view.number), self.NUMBER_COLORS.get(view.number, fg)
                elif view.kind == "marked":
                    text, fg = "F", "#EF4444"
                elif view.kind == "question":
                    text, fg = "?", "#2563EB"
                if view.highlighted:
                    bg = self.FIRE_BG
                self.canvas.create_rectangle(x0, y0, x1, y1, fill=bg, outline="#9CA3AF")
                if text:
                    self.canvas.create_text((x0 + x1) // 2, (y0 + y1) // 2, text=text, fill=fg, font=font)
        self._update_counters()

    def _update_counters(self):
        self.mines_label.config(text=f"Mines: {self.board.mines_left():03d}")
        self.timer_label.config(text=f"Time: {int(self.board.elapsed()):03d}")

    def _start_timer(self):
        def tick():
            self._update_counters()
            self.timer_job = self.root.after(1000, tick)

        self.timer_job = self.root.after(1000, tick)

    def _animate(self):
        if self.board.tick():
            self.anim_job = self.root.after(self.TICK_MS, self._animate)
        else:
            self.anim_job = None
        self._redraw()

    def _stop_jobs(self):
        for job in (self.timer_job, self.anim_job):
            if job is not None:
                self.root.after_cancel(job)
        self.timer_job = None
        self.anim_job = None

    def _on_win(self, score):
        self.last_score = score
        if self.score_store is None:
            return
        try:
            self.score_store.add(score)
        except LeaderboardError as exc:
            messagebox.showwarning("Leaderboard", str(exc))

    def _game_over(self):
        self._stop_jobs()
        self._update_counters()
        if isinstance(self.board.phase, Lost):
            self.anim_job = self.root.after(self.TICK_MS, self._animate)
        elif isinstance(self.board.phase, Won):
            self.highscore_panel.refresh(self.difficulty, self.last_score)
            messagebox.showinfo("Game Over", f"You win! {self.last_score.seconds}s on {self.difficulty.label}")
            self.notebook.select(self.highscore_panel.frame)

    def run_analytics_report(self):
        try:
            reports_dir = os.path.join(get_leaderboard_dir(), "reports")
            os.makedirs(reports_dir, exist_ok=True)
        except (RuntimeError, OSError) as exc:
            messagebox.showwarning("Analytics", f"No place to store reports:\n{exc}")
            return
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        pdf_path = os.path.join(reports_dir, f"{self.difficulty.label}_{stamp}.pdf")
        try:
            generate_report(self.difficulty, 100, pdf_path, dimensions=(self.board.width, self.board.height))
        except (OSError, ValueError) as exc:
            messagebox.showwarning("Analytics", f"Failed to build analytics report:\n{exc}")
            return
        logger.info("Analytics report written to %s", pdf_path)
        messagebox.showinfo("Analytics", f"Report saved to {os.path.basename(pdf_path)}")


def open_score_store():
    try:
        return ScoreStore(get_leaderboard_path())
    except RuntimeError as exc:
        logger.warning("Playing without a leaderboard: %s", exc)
        return None


def main():
    logging.basicConfig(level=logging.INFO)
    root = tk.Tk()
    root.title("Minesweeper")
    Minesweeper(root, score_store=open_score_store())
    root.mainloop()


if __name__ == "__main__":
    main()
