from pydantic import BaseModel, Field


# ─── SOLVER ───

class SolverConfig(BaseModel):
    """Solver-Konfiguration (CP-SAT)."""
    # Zeitlimit für den Solver in Sekunden
    time_limit_seconds: float = Field(30.0, gt=0, le=3600,
        description="Zeitlimit Solver (Sekunden)")
    # Anzahl CPU-Kerne (0 = automatisch alle nutzen).
    # 1 ist Default, weil nur ein Worker reproduzierbare Lösungen liefert.
    num_workers: int = Field(1, ge=0,
        description="CPU-Kerne (0=automatisch, 1=reproduzierbar)")
    # Startwert für die Suche
    random_seed: int = Field(0, ge=0,
        description="Zufalls-Seed des Solvers")
    # Darf ein Tutor im selben Slot mehrere Teams parallel prüfen?
    allow_concurrent_sessions: bool = Field(False,
        description="Mehrere Testate pro Tutor und Slot erlauben")
    # Nachfrage/Angebot als Tie-Break bei gleicher Präferenz berücksichtigen
    use_guidance: bool = Field(True,
        description="Nachfrage/Angebot als Tie-Break nutzen")
    # Suchfortschritt von CP-SAT ausgeben
    log_search_progress: bool = Field(False,
        description="CP-SAT-Suchlog ausgeben")


# ─── GESAMT-CONFIG ───

class EngineConfig(BaseModel):
    """Gesamtkonfiguration der Testat-Planung."""
    # Solver-Konfiguration
    solver: SolverConfig = Field(default_factory=SolverConfig)
    # Log-Level der Kommandozeile (DEBUG, INFO, WARNING, ERROR)
    log_level: str = Field("INFO", pattern="^(DEBUG|INFO|WARNING|ERROR)$",
        description="Log-Level der Kommandozeile")
