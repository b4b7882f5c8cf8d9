"""Transfer functions from the Eisenstein & Hu fitting formulae, and a registry for them."""

from __future__ import annotations

import enum
import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping

from lptics.random_plugin import UnknownPluginError

logger = logging.getLogger(__name__)


class TransferType(enum.Enum):
    """The species and quantity a transfer function is evaluated for."""

    DELTA_MATTER = "delta_matter"
    DELTA_CDM = "delta_cdm"
    DELTA_BARYON = "delta_baryon"
    THETA_MATTER = "theta_matter"
    THETA_CDM = "theta_cdm"
    THETA_BARYON = "theta_baryon"
    DELTA_BC = "delta_bc"
    THETA_BC = "theta_bc"
    DELTA_MATTER0 = "delta_matter0"
    DELTA_CDM0 = "delta_cdm0"
    DELTA_BARYON0 = "delta_baryon0"
    THETA_MATTER0 = "theta_matter0"
    THETA_CDM0 = "theta_cdm0"
    THETA_BARYON0 = "theta_baryon0"


_RELATIVE_TYPES = (TransferType.DELTA_BC, TransferType.THETA_BC)


class TransferFunction(ABC):
    """Base class of all transfer function models.

    ``params`` is a mapping of cosmological parameters such as ``H0``,
    ``Omega_m``, ``Omega_b`` and ``Tcmb``.
    """

    def __init__(self, config, params: Mapping[str, float]):
        self.config = config
        self.params = params
        self.is_normalised = False
        self.is_distinct = False
        self.with_velocity = False
        self.has_total0 = False

    @abstractmethod
    def compute(self, k: float, tf_type: TransferType) -> float:
        """Return the transfer function at wave number ``k`` (in h/Mpc)."""

    def kmin(self) -> float:
        """Smallest wave number (h/Mpc) for which the model is valid."""
        return 1e-4

    def kmax(self) -> float:
        """Largest wave number (h/Mpc) for which the model is valid."""
        return 1.0e4


class EisensteinTransfer:
    """The Eisenstein & Hu (1997) fitting formula for the matter transfer function.

    ``h0`` is the Hubble constant in km/s/Mpc and ``tcmb`` the CMB temperature
    in Kelvin (values <= 0 select 2.728 K).
    """

    def __init__(self, h0: float, omega_m: float, omega_b: float, tcmb: float):
        self.h = h0 * 0.01
        self._set_parameters(omega_m * h0 * h0 * (0.01 * 0.01), omega_b / omega_m, tcmb)
        self.fb = omega_b / omega_m
        self.fc = (omega_m - omega_b) / omega_m

    def _set_parameters(self, omega0hh: float, f_baryon: float, tcmb: float) -> None:
        if f_baryon <= 0.0 or omega0hh <= 0.0:
            raise ValueError("TFset_parameters(): Illegal input.")
        omhh = omega0hh
        obhh = omhh * f_baryon
        if tcmb <= 0.0:
            tcmb = 2.728
        theta_cmb = tcmb / 2.7

        z_equality = 2.50e4 * omhh / theta_cmb**4
        k_equality = 0.0746 * omhh / theta_cmb**2

        z_drag_b1 = 0.313 * omhh**-0.419 * (1 + 0.607 * omhh**0.674)
        z_drag_b2 = 0.238 * omhh**0.223
        z_drag = (
            1291 * omhh**0.251 / (1 + 0.659 * omhh**0.828) * (1 + z_drag_b1 * obhh**z_drag_b2)
        )

        r_drag = 31.5 * obhh / theta_cmb**4 * (1000 / (1 + z_drag))
        r_equality = 31.5 * obhh / theta_cmb**4 * (1000 / z_equality)

        sound_horizon = (
            2.0 / 3.0 / k_equality * math.sqrt(6.0 / r_equality)
            * math.log((math.sqrt(1 + r_drag) + math.sqrt(r_drag + r_equality))
                       / (1 + math.sqrt(r_equality)))
        )

        k_silk = 1.6 * obhh**0.52 * omhh**0.73 * (1 + (10.4 * omhh) ** -0.95)

        alpha_c_a1 = (46.9 * omhh) ** 0.670 * (1 + (32.1 * omhh) ** -0.532)
        alpha_c_a2 = (12.0 * omhh) ** 0.424 * (1 + (45.0 * omhh) ** -0.582)
        alpha_c = alpha_c_a1**-f_baryon * alpha_c_a2 ** -(f_baryon**3)

        beta_c_b1 = 0.944 / (1 + (458 * omhh) ** -0.708)
        beta_c_b2 = (0.395 * omhh) ** -0.0266
        beta_c = 1.0 / (1 + beta_c_b1 * ((1 - f_baryon) ** beta_c_b2 - 1))

        y = z_equality / (1 + z_drag)
        sq = math.sqrt(1 + y)
        alpha_b_g = y * (-6.0 * sq + (2.0 + 3.0 * y) * math.log((sq + 1) / (sq - 1)))
        alpha_b = 2.07 * k_equality * sound_horizon * (1 + r_drag) ** -0.75 * alpha_b_g

        self.omhh = omhh
        self.obhh = obhh
        self.theta_cmb = theta_cmb
        self.z_equality = z_equality
        self.k_equality = k_equality
        self.z_drag = z_drag
        self.r_drag = r_drag
        self.r_equality = r_equality
        self.sound_horizon = sound_horizon
        self.k_silk = k_silk
        self.alpha_c = alpha_c
        self.beta_c = beta_c
        self.alpha_b = alpha_b
        self.beta_node = 8.41 * omhh**0.435
        self.beta_b = 0.5 + f_baryon + (3.0 - 2.0 * f_baryon) * math.sqrt((17.2 * omhh) ** 2 + 1)
        self.k_peak = 2.5 * 3.14159 * (1 + 0.217 * omhh) / sound_horizon
        self.sound_horizon_fit = 44.5 * math.log(9.83 / omhh) / math.sqrt(1 + 10.0 * obhh**0.75)
        self.alpha_gamma = (
            1 - 0.328 * math.log(431.0 * omhh) * f_baryon
            + 0.38 * math.log(22.3 * omhh) * f_baryon**2
        )

    def fit_onek(self, k: float) -> tuple[float, float, float]:
        """Return ``(full, baryon, cdm)`` transfer functions at ``k`` in 1/Mpc."""
        k = abs(k)
        if k == 0.0:
            return 1.0, 1.0, 1.0

        q = k / 13.41 / self.k_equality
        xx = k * self.sound_horizon

        t_c_ln_beta = math.log(2.718282 + 1.8 * self.beta_c * q)
        t_c_ln_nobeta = math.log(2.718282 + 1.8 * q)
        t_c_c_alpha = 14.2 / self.alpha_c + 386.0 / (1 + 69.9 * q**1.08)
        t_c_c_noalpha = 14.2 + 386.0 / (1 + 69.9 * q**1.08)

        t_c_f = 1.0 / (1.0 + (xx / 5.4) ** 4)
        t_c = (t_c_f * t_c_ln_beta / (t_c_ln_beta + t_c_c_noalpha * q * q)
               + (1 - t_c_f) * t_c_ln_beta / (t_c_ln_beta + t_c_c_alpha * q * q))

        s_tilde = self.sound_horizon * (1.0 + (self.beta_node / xx) ** 3) ** (-1.0 / 3.0)
        xx_tilde = k * s_tilde

        t_b_t0 = t_c_ln_nobeta / (t_c_ln_nobeta + t_c_c_noalpha * q * q)
        t_b = math.sin(xx_tilde) / xx_tilde * (
            t_b_t0 / (1.0 + (xx / 5.2) ** 2)
            + self.alpha_b / (1.0 + (self.beta_b / xx) ** 3) * math.exp(-((k / self.k_silk) ** 1.4))
        )

        f_baryon = self.obhh / self.omhh
        t_full = f_baryon * t_b + (1 - f_baryon) * t_c
        return t_full, t_b, t_c

    def at_k(self, k: float) -> float:
        """Return the mass-weighted transfer function at ``k`` in h/Mpc."""
        _, tfb, tfc = self.fit_onek(k * self.h)
        return self.fb * tfb + self.fc * tfc


def _eisenstein_from_params(params: Mapping[str, float]) -> EisensteinTransfer:
    return EisensteinTransfer(params["H0"], params["Omega_m"], params["Omega_b"], params["Tcmb"])


class EisensteinPlugin(TransferFunction):
    """Eisenstein & Hu transfer function for cold dark matter."""

    def __init__(self, config, params):
        super().__init__(config, params)
        self.etf = _eisenstein_from_params(params)

    def compute(self, k, tf_type):
        if tf_type in _RELATIVE_TYPES:
            return 0.0
        return self.etf.at_k(k)


class EisensteinWDMPlugin(TransferFunction):
    """Eisenstein & Hu transfer function with a warm dark matter cut-off."""

    _FITS = ("BODE", "VIEL", "BODE_WRONG")

    def __init__(self, config, params):
        super().__init__(config, params)
        self.h0 = params["H0"]
        self.omega_m = params["Omega_m"]
        self.omega_b = params["Omega_b"]
        self.wdm_mass = config.get_value("cosmology", "WDMmass", float)
        self.etf = _eisenstein_from_params(params)

        self.fit = config.get_value_safe("cosmology", "WDMtftype", "BODE")
        if self.fit not in self._FITS:
            raise ValueError("unknown transfer function fit for WDM")

        self.wdm_gx = None
        if self.fit == "VIEL":
            # Viel et al. (2005), Phys Rev D, 71
            self.wdm_nu = config.get_value_safe("cosmology", "WDMnu", 1.12)
            self.alpha = (0.049 * (self.omega_m / 0.25) ** 0.11
                          * (self.h0 * 0.01 / 0.7) ** 1.22 * self.wdm_mass**-1.11)
        else:
            # Bode et al. (2001), ApJ, 556, 93; BODE_WRONG keeps the historical H-for-h slip
            self.wdm_nu = config.get_value_safe("cosmology", "WDMnu", 1.0)
            self.wdm_gx = config.get_value_safe("cosmology", "WDMg_x", 1.5)
            hubble = self.h0 if self.fit == "BODE_WRONG" else self.h0 * 0.01
            self.alpha = (0.05 * (self.omega_m / 0.4) ** 0.15 * (hubble / 0.65) ** 1.3
                          * self.wdm_mass**-1.15 * (1.5 / self.wdm_gx) ** 0.29)
        logger.info("WDM alpha = %g", self.alpha)

    def compute(self, k, tf_type):
        if tf_type in _RELATIVE_TYPES:
            return 0.0
        cutoff = (1.0 + (self.alpha * k) ** (2.0 * self.wdm_nu)) ** (-5.0 / self.wdm_nu)
        return self.etf.at_k(k) * cutoff


class EisensteinCDMBinoPlugin(TransferFunction):
    """Eisenstein & Hu transfer function damped for bino-like WIMP dark matter.

    Follows Green, Hofmann & Schwarz (2004).
    """

    def __init__(self, config, params):
        super().__init__(config, params)
        self.h0 = params["H0"]
        self.h = self.h0 / 100.0
        self.etf = _eisenstein_from_params(params)
        self.cdm_mass = config.get_value_safe("cosmology", "CDM_mass", 100.0)
        self.t_kd = config.get_value_safe("cosmology", "CDM_Tkd", 33.0)
        scale = math.sqrt(self.cdm_mass / 100.0 * self.t_kd / 30.0)
        self.k_fs = 1.7e6 / self.h * scale / (1.0 + math.log(self.t_kd / 30.0) / 19.2)
        self.k_d = 3.8e7 / self.h * scale

    def compute(self, k, tf_type):
        if tf_type in _RELATIVE_TYPES:
            return 0.0
        kkfs2 = (k / self.k_fs) ** 2
        kkd2 = (k / self.k_d) ** 2
        # the fit crosses zero at (k/k_fs)^2 = 3/2 and is zeroed beyond
        if kkfs2 < 1.5:
            return self.etf.at_k(k) * (1.0 - 2.0 / 3.0 * kkfs2) * math.exp(-kkfs2 - kkd2)
        return 0.0

    def kmax(self):
        return 1.0e8


_REGISTRY: dict[str, Callable] = {}


def register_transfer_function(name: str, factory: Callable) -> None:
    """Make ``factory(config, params)`` available under ``name``."""
    _REGISTRY[name] = factory


def available_transfer_functions() -> list[str]:
    """Return the names of all registered transfer functions, sorted."""
    return sorted(_REGISTRY)


def select_transfer_function(config, params) -> TransferFunction:
    """Create the transfer function named by ``cosmology/transfer`` in ``config``."""
    name = config.get_value("cosmology", "transfer")
    factory = _REGISTRY.get(name)
    if factory is None:
        logger.info("Invalid/Unregistered transfer function plug-in encountered : %s", name)
        logger.info("Available transfer function plug-ins: %s",
                    ", ".join(available_transfer_functions()))
        raise UnknownPluginError(f"Unknown transfer function plug-in '{name}'")
    logger.info("%-32s : %s", "Transfer function plugin", name)
    return factory(config, params)


register_transfer_function("eisenstein", EisensteinPlugin)
register_transfer_function("eisenstein_wdm", EisensteinWDMPlugin)
register_transfer_function("eisenstein_cdmbino", EisensteinCDMBinoPlugin)