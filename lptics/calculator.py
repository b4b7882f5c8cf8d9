"""Cosmological background, linear growth and power spectrum normalisation."""

from __future__ import annotations

import logging
import math
import os
import warnings
from collections.abc import Mapping

import numpy as np
from scipy.integrate import IntegrationWarning, quad
from scipy.interpolate import PchipInterpolator

from lptics.growth import compute_growth, hubble_parameter
from lptics.transfer import TransferFunction, TransferType, select_transfer_function

logger = logging.getLogger(__name__)

REL_PRECISION = 1e-10
_QUAD_LIMIT = 1000


class _LogLogInterpolator:
    """Monotone interpolation of tabulated positive data in log-log space."""

    def __init__(self, x, y):
        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        order = np.argsort(x, kind="stable")
        x, first = np.unique(x[order], return_index=True)
        y = y[order][first]
        if x.size < 2:
            raise ValueError("at least two distinct table entries are needed")
        self._spline = PchipInterpolator(np.log(x), np.log(y), extrapolate=True)

    def __call__(self, x: float) -> float:
        return float(np.exp(self._spline(math.log(x))))


def _window(x: float) -> float:
    """Fourier transform of a spherical top-hat window."""
    if x < 0.001:
        return 1.0 - 0.1 * x * x
    return 3.0 * (math.sin(x) - x * math.cos(x)) / (x * x * x)


class CosmologyCalculator:
    """Friedmann background, linear growth and normalised power spectra.

    ``params`` is a mapping of cosmological parameters (``H0``, ``h``,
    ``Omega_m``, ``Omega_r``, ``Omega_k``, ``Omega_DE``, ``w_0``, ``w_a``,
    ``n_s``, ``sigma_8``, ``A_s``, ``k_p``, ...). A copy is kept in
    :attr:`params`, to which ``pnorm`` and ``sqrtpnorm`` are added.
    If ``transfer_function`` is not given, the one named in the configuration
    is created.
    """

    def __init__(self, config, params: Mapping[str, float],
                 transfer_function: TransferFunction | None = None):
        self.config = config
        self.params = dict(params)
        self.astart = 1.0 / (1.0 + config.get_value("setup", "zstart", float))
        self.atarget = 1.0 / (1.0 + config.get_value_safe("cosmology", "ztarget", 0.0))

        tab_a, tab_d, tab_f = compute_growth(
            self.hubble, self.params["Omega_m"], self.params["H0"]
        )
        self._d_of_a = _LogLogInterpolator(tab_a, tab_d)
        self._f_of_a = _LogLogInterpolator(tab_a, tab_f)
        self._a_of_d = _LogLogInterpolator(tab_d, tab_a)
        self._dnow = self._d_of_a(1.0)

        self.dplus_start = self._d_of_a(self.astart) / self._dnow
        self.dplus_target = self._d_of_a(self.atarget) / self._dnow
        logger.info("Linear growth factors: D+_target = %g, D+_start = %g",
                    self.dplus_target, self.dplus_start)

        if transfer_function is None:
            transfer_function = select_transfer_function(config, self.params)
        self.transfer_function = transfer_function

        self._n_s = self.params["n_s"]
        if not transfer_function.is_normalised:
            self._sqrtpnorm = 1.0
            pnorm = self.compute_pnorm_from_sigma8()
        else:
            pnorm = 1.0 / self.dplus_target / self.dplus_target
            self._sqrtpnorm = math.sqrt(pnorm)
            logger.info("Measured sigma_8 for given PS normalisation is %g",
                        self.compute_sigma8())
        self.params["pnorm"] = pnorm
        self.params["sqrtpnorm"] = math.sqrt(pnorm)
        self._sqrtpnorm = self.params["sqrtpnorm"]

        tf = transfer_function
        logger.info("%-32s : %s", "TF supports distinct CDM+baryons",
                    "yes" if tf.is_distinct else "no")
        logger.info("%-32s : %g h/Mpc", "TF minimum wave number", tf.kmin())
        logger.info("%-32s : %g h/Mpc", "TF maximum wave number", tf.kmax())
        box_length = config.get_value("setup", "BoxLength", float)
        grid_res = config.get_value("setup", "GridRes", float)
        k_nyquist = math.sqrt(3.0) * 2.0 * math.pi / box_length * grid_res / 2
        if k_nyquist >= tf.kmax():
            logger.error("Simulation nyquist mode kny = %g h/Mpc is beyond valid range "
                         "of transfer function!", k_nyquist)

        k_p = self.params["k_p"] / self.params["h"]
        radicand = (2.0 * math.pi * math.pi * self.params["A_s"]
                    * (1.0 / k_p) ** (self._n_s - 1) / (2.0 * math.pi) ** 3)
        self._tnorm = math.sqrt(radicand) if radicand >= 0.0 else math.nan

    def hubble(self, a: float) -> float:
        """Return the Hubble function H(a)."""
        return float(hubble_parameter(a, self.params))

    def growth_factor(self, a: float) -> float:
        """Linear growth factor D+(a), normalised to D+(1) = 1."""
        return self._d_of_a(a) / self._dnow

    def scale_factor(self, dplus: float) -> float:
        """Inverse of :meth:`growth_factor`: the scale factor a(D+)."""
        return self._a_of_d(dplus * self._dnow)

    def growth_rate(self, a: float) -> float:
        """Linear growth rate f = dlog D+ / dlog a."""
        return self._f_of_a(a)

    def velocity_factor(self, a: float) -> float:
        """Factor relating displacement and velocity, a * H(a)/h * f(a)."""
        return self._f_of_a(a) * a * self.hubble(a) / self.params["h"]

    def amplitude(self, k: float, tf_type: TransferType) -> float:
        """Amplitude of fluctuations of ``tf_type`` at wave number ``k`` (h/Mpc)."""
        return k ** (0.5 * self._n_s) * self.transfer_function.compute(k, tf_type) * self._sqrtpnorm

    def transfer(self, k: float, tf_type: TransferType) -> float:
        """Transfer function scaled by -k^2 and the primordial normalisation."""
        return (-self.transfer_function.compute(k, tf_type) * k * k
                / self._tnorm * self._sqrtpnorm)

    def amplitude_delta_bc(self, k: float, with_vbc: bool) -> float:
        """Back-scaled delta_bc amplitude, optionally with decaying relative velocity."""
        dratio = self.dplus_target / self.dplus_start
        tf = self.transfer_function
        dbc = tf.compute(k, TransferType.DELTA_BC)
        if with_vbc:
            dbc += 2 * tf.compute(k, TransferType.THETA_BC) * (math.sqrt(dratio) - 1.0)
        return k ** (0.5 * self._n_s) * dbc * (self._sqrtpnorm * self.dplus_target)

    def amplitude_theta_bc(self, k: float, with_vbc: bool) -> float:
        """Back-scaled theta_bc amplitude, or zero without relative velocity."""
        if not with_vbc:
            return 0.0
        dratio = self.dplus_target / self.dplus_start
        tbc = self.transfer_function.compute(k, TransferType.THETA_BC) * math.sqrt(dratio)
        return k ** (0.5 * self._n_s) * tbc * (self._sqrtpnorm * self.dplus_target)

    def _integrate(self, func, lower: float, upper: float) -> float:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", IntegrationWarning)
            result, error = quad(func, lower, upper, epsabs=0.0,
                                 epsrel=REL_PRECISION, limit=_QUAD_LIMIT)
        if result != 0.0 and error / result > REL_PRECISION:
            logger.warning("no convergence in function 'integrate', rel. error=%g",
                           error / result)
        return result

    def compute_sigma8(self) -> float:
        """Return sigma_8 of the unnormalised transfer function at a = 1."""
        tf = self.transfer_function
        tf_type = TransferType.DELTA_MATTER0 if tf.has_total0 else TransferType.DELTA_MATTER
        nspect = self._n_s

        def integrand(k):
            w = _window(k * 8.0)
            t = tf.compute(k, tf_type)
            return k * k * w * w * k**nspect * t * t

        sigma0 = 4.0 * math.pi * self._integrate(integrand, tf.kmin(), tf.kmax())
        return math.sqrt(sigma0)

    def compute_pnorm_from_sigma8(self) -> float:
        """Return the power spectrum normalisation that yields the target sigma_8."""
        measured = self.compute_sigma8()
        sigma_8 = self.params["sigma_8"]
        return sigma_8 * sigma_8 / (measured * measured)

    def _k_values(self):
        tf = self.transfer_function
        k = max(1e-4, tf.kmin())
        kmax = tf.kmax()
        while k < kmax:
            yield k
            k *= 1.01

    def write_powerspectrum(self, a: float, fname) -> None:
        """Write the power spectra of matter, CDM and baryons to a text file."""
        names = ("P_dtot(k,a=ap)", "P_dcdm(k,a=ap)", "P_dbar(k,a=ap)",
                 "P_tcdm(k,a=ap)", "P_tbar(k,a=ap)", "P_dtot(k,a=1)",
                 "P_dcdm(k,a=1)", "P_dbar(k,a=1)", "P_tcdm(k,a=1)", "P_tbar(k,a=1)")
        types = (TransferType.DELTA_MATTER, TransferType.DELTA_CDM, TransferType.DELTA_BARYON)
        with open(os.fspath(fname), "w", encoding="utf-8") as out:
            out.write("# " + f"{'k [h/Mpc]':>18}" + "".join(f"{n:>20}" for n in names) + "\n")
            for k in self._k_values():
                values = [(self.amplitude(k, t) * self.dplus_start) ** 2 for t in types]
                out.write(f"{k:20.10g}" + "".join(f"{v:20.10g}" for v in values) + "\n")
        logger.info("Wrote power spectrum at a=%g to file '%s'", a, fname)

    def write_transfer(self, fname) -> None:
        """Write the back-scaled input transfer functions to a text file."""
        names = ("delta_c(k,a=ap)", "delta_b(k,a=ap)", "delta_m(k,a=ap)", "delta_bc(k,a=ap)")
        fb = self.params["f_b"]
        fc = self.params["f_c"]
        ds, dt = self.dplus_start, self.dplus_target
        vscale = math.sqrt(ds / dt)
        with open(os.fspath(fname), "w", encoding="utf-8") as out:
            out.write("# " + f"{'k [h/Mpc]':>18}" + "".join(f"{n:>20}" for n in names) + "\n")
            for k in self._k_values():
                dm = self.amplitude(k, TransferType.DELTA_MATTER) * ds / dt
                dbc = self.amplitude(k, TransferType.DELTA_BC)
                db = dm + fc * dbc
                dc = dm - fb * dbc
                tm = dm
                tbc = self.amplitude(k, TransferType.THETA_BC)
                tb = dm + fc * dbc
                tc = dm - fb * dbc
                values = (dc, db, dm, dbc + 2 * tbc * (math.sqrt(dt / ds) - 1.0),
                          tc / vscale, tb / vscale, tm / vscale, tbc / vscale)
                out.write(f"{k:20.10g}" + "".join(f"{v:20.10g}" for v in values) + "\n")
        logger.info("Wrote input transfer functions at a=%g to file '%s'", self.astart, fname)