"""Export-Modul: Terminal-Darstellung (Rich) von Testat-Plänen."""

from export.tui_renderer import render_balance_rows, render_solution_rows, render_tutor_rows

__all__ = ["render_balance_rows", "render_solution_rows", "render_tutor_rows"]
