"""Building blocks for cosmological initial conditions: configuration files, vectors and boxes, Eisenstein & Hu transfer functions, linear growth, power-spectrum normalisation and Fourier-space field products."""

__version__ = "0.1.0"