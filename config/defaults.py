"""Standard-Konfiguration."""

from config.schema import EngineConfig, SolverConfig


def default_solver_config() -> SolverConfig:
    return SolverConfig()


def default_config() -> EngineConfig:
    return EngineConfig(solver=default_solver_config())
