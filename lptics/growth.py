"""Linear growth of density perturbations in a Friedmann background."""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping

import numpy as np
from scipy.integrate import solve_ivp

SPEED_OF_LIGHT = 2.99792458e8  # m/s

_A_INITIAL = 1e-10
_A_MAX = 2.0
_FIRST_STEP = 1e-9
_REL_TOLERANCE = 1e-10
_MAX_EXTENSIONS = 1000


def hubble_parameter(a, params: Mapping[str, float]):
    """Return the Hubble function H(a) in the units of ``params["H0"]``.

    ``params`` holds ``H0``, ``Omega_r``, ``Omega_m``, ``Omega_k``,
    ``Omega_DE``, ``w_0`` and ``w_a``.
    """
    w_0 = params["w_0"]
    w_a = params["w_a"]
    hh2 = (
        params["Omega_r"] / a**4
        + params["Omega_m"] / a**3
        + params["Omega_k"] / a**2
        + params["Omega_DE"] * a ** (-3.0 * (1.0 + w_0 + w_a)) * np.exp(-3.0 * (1.0 - a) * w_a)
    )
    return params["H0"] * np.sqrt(hh2)


def compute_growth(
    hubble: Callable[[float], float], omega_m: float, h0: float
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Integrate the single-fluid growth equation in conformal time.

    Starts deep in radiation domination and stops once the scale factor
    reaches 2. Returns tables ``(a, D, f)`` with ``f = dlog D / dlog a``,
    one entry per accepted integration step.
    """
    d0 = _A_INITIAL
    dprime0 = 2.0 * d0 * hubble(_A_INITIAL) / SPEED_OF_LIGHT**2
    t = 1.0 / (_A_INITIAL * hubble(_A_INITIAL))
    y = np.array([_A_INITIAL, d0, dprime0])
    growth_source = 1.5 * omega_m * h0**2

    def rhs(_tau, state):
        a, d, dprime = state
        ha = hubble(a)
        return [a * a * ha, dprime, -a * ha * dprime + growth_source * d / a]

    def reached_end(_tau, state):
        return state[0] - _A_MAX

    reached_end.terminal = True
    reached_end.direction = 1

    chunk = 10.0 / (_A_MAX * hubble(_A_MAX))
    times: list[np.ndarray] = []
    states: list[np.ndarray] = []
    first_step = _FIRST_STEP
    for _ in range(_MAX_EXTENSIONS):
        sol = solve_ivp(
            rhs,
            (t, t + chunk),
            y,
            method="DOP853",
            rtol=_REL_TOLERANCE,
            atol=1e-300,
            first_step=first_step,
            events=reached_end,
        )
        if not sol.success and sol.status != 1:
            raise RuntimeError(f"growth integration failed: {sol.message}")
        times.append(sol.t[1:])
        states.append(sol.y[:, 1:])
        if sol.status == 1:
            break
        t = sol.t[-1]
        y = sol.y[:, -1]
        first_step = None
    else:
        raise RuntimeError("scale factor did not reach its final value during growth integration")

    table = np.concatenate(states, axis=1)
    tab_a, tab_d, tab_dprime = table
    tab_h = np.array([hubble(a) for a in tab_a])
    tab_f = tab_dprime / (tab_a * tab_h * tab_d)
    return tab_a.copy(), tab_d.copy(), tab_f


__all__ = ["SPEED_OF_LIGHT", "compute_growth", "hubble_parameter"]

# keep math imported for callers passing plain-float hubble functions
_ = math