# lptics

Building blocks for generating cosmological initial conditions. The package
covers configuration files, the linear growth of structure, fitted matter
transfer functions, power-spectrum normalisation, and products of fields
computed in Fourier space.

## Modules

- `lptics.config`: `ConfigFile` reads INI-style files. Sections are opened
  with `[name]` and entries are written as `key = value`. Text after `#`, `;`
  or `%` is a comment. Values are addressed as `section/key`.
  - Reading values:
    - `get_value(section, key, value_type=str)` converts the value to the
      given type. It raises `ItemNotFoundError` if the key is missing and
      `InvalidConversionError` if the conversion fails.
    - `get_value_safe(section, key, default)` returns `default` when the key
      is absent. Otherwise it converts the value to the type of `default`.
    - `get_bool` accepts `true/yes/on/1` and `false/no/off/0`. It raises
      `IllegalIdentifierError` for any other value.
    - `get_bool_safe` is case-insensitive and also accepts `yay` and `nay`.
      It falls back to the default for unknown values.
  - Other methods:
    - `insert_value` and `contains_key` take an optional `section`.
    - `dump(out)` writes the non-empty entries to a text stream.
    - `dump_to_log()` logs them.
    - `get_path_relative_to_config(name)` prefixes `name` with the config
      file's path minus its extension, stored as `meta/config_basename`.
  - All errors derive from `ConfigError`.
- `lptics.vec`: `Vec`, a fixed-length vector. It supports element-wise `+`,
  `-` and negation, and multiplication and division by a scalar, including
  the in-place forms. `abs()` returns the component-wise absolute values.
- `lptics.bounding_box`: `BoundingBox(x1, x2)`. `intersect(other)` returns
  the overlap of two boxes, and `box /= other` shrinks `box` to that overlap.
- `lptics.transfer`: transfer function models.
  - Models:
    - `EisensteinTransfer(h0, omega_m, omega_b, tcmb)` implements the
      Eisenstein & Hu (1997) fitting formula.
    - `fit_onek(k)` takes k in 1/Mpc and returns `(full, baryon, cdm)`.
    - `at_k(k)` takes k in h/Mpc and returns the mass-weighted transfer
      function.
  - Plug-ins deriving from `TransferFunction`, each with
    `compute(k, tf_type)`, `kmin()` and `kmax()`:
    - `EisensteinPlugin` (`eisenstein`).
    - `EisensteinWDMPlugin` (`eisenstein_wdm`), a warm dark matter cut-off.
      Set it with `cosmology/WDMmass` and the optional `WDMtftype`
      (`BODE`, `VIEL`, `BODE_WRONG`), `WDMnu` and `WDMg_x`.
    - `EisensteinCDMBinoPlugin` (`eisenstein_cdmbino`), a damped bino-WIMP
      spectrum. Set it with `cosmology/CDM_mass` and `CDM_Tkd`.
  - `TransferType` names the species and quantity to evaluate.
  - Registry:
    - `select_transfer_function(config, params)` creates the plug-in named
      by `cosmology/transfer`.
    - `register_transfer_function` adds more plug-ins.
    - `available_transfer_functions` lists the registered names.
- `lptics.random_plugin`: a registry for random number generator plug-ins.
  - `register_rng_plugin(name, factory)` adds a generator.
  - `rng_plugin_names()` lists the registered names.
  - `print_rng_plugins()` logs them.
  - `select_rng_plugin(config)` calls the factory named by
    `random/generator`.
  - Unknown names raise `UnknownPluginError`.
- `lptics.growth`: the background and the growth ODE.
  - `hubble_parameter(a, params)` computes H(a) from `H0`, `Omega_r`,
    `Omega_m`, `Omega_k`, `Omega_DE`, `w_0` and `w_a`.
  - `compute_growth(hubble, omega_m, h0)` integrates the single-fluid growth
    equation from deep in radiation domination up to a = 2. It returns the
    tables `(a, D, f)`.
- `lptics.calculator`: `CosmologyCalculator(config, params,
  transfer_function=None)`.
  - It reads `setup/zstart`, `setup/BoxLength` and `setup/GridRes`, and
    optionally `cosmology/ztarget`.
  - It builds the growth tables and normalises the power spectrum. The
    normalisation comes from `sigma_8`, unless the transfer function is
    already normalised.
  - Methods:
    - Background and growth: `hubble`, `growth_factor`, `scale_factor`,
      `growth_rate`, `velocity_factor`.
    - Amplitudes and transfer: `amplitude`, `transfer`,
      `amplitude_delta_bc`, `amplitude_theta_bc`.
    - Normalisation: `compute_sigma8`, `compute_pnorm_from_sigma8`.
    - Output tables: `write_powerspectrum(a, fname)` and
      `write_transfer(fname)`.
  - `params` must also hold `h`, `n_s`, `sigma_8`, `A_s` and `k_p`.
    `write_transfer` needs `f_b` and `f_c` as well.
- `lptics.convolution`: `wavenumbers(shape, lengths)` gives the wave-number
  arrays of a 3-D `numpy.fft.rfftn` grid.
  - `BaseConvolver` forms products of fields, their gradients and their
    Hessians:
    - `convolve_gradients`, `convolve_gradient_and_hessian` and
      `convolve_hessians`.
    - `convolve_three_hessians`, `convolve_sum_of_hessians` and
      `convolve_difference_of_hessians`.
    - `multiply_fields`.
  - Inputs may be real-space or rfftn arrays. Results are returned in
    Fourier space.
  - `NaiveConvolver` multiplies without padding, so products alias onto the
    grid.
- `lptics.orszag`: `OrszagConvolver` dealiases with the 3/2 padding rule.
  Grid sizes must be even. Nyquist modes of the result are set to zero.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from lptics.config import ConfigFile
from lptics.transfer import EisensteinTransfer

cfg = ConfigFile("ics.conf")
zstart = cfg.get_value("setup", "zstart", float)
do_baryons = cfg.get_bool_safe("setup", "DoBaryons", False)

tf = EisensteinTransfer(h0=67.7, omega_m=0.31, omega_b=0.049, tcmb=2.7255)
print(tf.at_k(0.1))
```

Spectral products of fields:

```python
import numpy as np
from lptics.orszag import OrszagConvolver

conv = OrszagConvolver((32, 32, 32), (100.0, 100.0, 100.0))
phi = np.fft.rfftn(np.random.default_rng(1).standard_normal((32, 32, 32)))
# (phi_{,xx} * phi_{,yy}) in Fourier space, dealiased
result = conv.convolve_hessians(phi, (0, 0), phi, (1, 1))
```

## What this package does not do

lptics is a library of parts. It has no command-line program and does not run
a full initial-conditions pipeline.

- It does not generate particles or displacement fields.
- It does not write snapshot files. HDF5 and simulation-code output are not
  supported.
- It does not run in parallel across processes.
- No random number generators ship with it. `select_rng_plugin` only finds
  what you register with `register_rng_plugin`.
- The transfer functions available are the Eisenstein & Hu fits. Tabulated
  transfer functions and Boltzmann-code transfer functions are not included.