# utils/particle_plot_utils.py

import numpy as np
import matplotlib.pyplot as plt

import cgs

# black and white line styles, cycled over species
LINE_STYLES = ["-", "--", "-.", ":", (0, (3, 1, 1, 1))]


def _style_axis(ax):
    """Clean axis style: no grid, bold inward ticks."""
    ax.tick_params(axis="both", which="both", direction="in", length=6, width=1.5, labelsize=10)
    ax.grid(False)


def _finalize(fig, show: bool, save_path: str | None):
    if save_path:
        fig.savefig(save_path, dpi=300, bbox_inches="tight")
        print(f"[INFO] Saved {save_path}")
    if show:
        plt.show()
    return fig


def plot_particle_spectra(particles, phi: float, R_min: float = 1.0, R_max: float = 1e4,
                          scale: float = 2.7, npoints: int = 200,
                          show: bool = True, save_path: str | None = None):
    """
    R^scale * I_R_TOA(R, phi) for every solved species.

    Parameters
    ----------
    particles : Particles
        Solved pipeline; species not done are skipped.
    phi : float
        Modulation potential [erg per unit charge].
    R_min, R_max : float
        Plot range [GV].
    """
    R = np.logspace(np.log10(R_min), np.log10(R_max), npoints) * cgs.GV
    R_GV = R / cgs.GV
    units = 1.0 / (cgs.m2 * cgs.sec * cgs.GeV)  # per m^2 s sr GV

    fig, ax = plt.subplots(figsize=(7, 5))
    solved = [p for p in particles if p.done]
    for i, particle in enumerate(solved):
        I = np.array([particle.I_R_TOA(r, phi) for r in R]) / units
        ax.loglog(R_GV, R_GV ** scale * I, linestyle=LINE_STYLES[i % len(LINE_STYLES)],
                  color="black", lw=1, label=particle.pid.name)
    ax.set_xlabel("Rigidity [GV]")
    ax.set_ylabel(rf"$R^{{{scale:g}}}\,I(R)$ [GV$^{{{scale - 1:g}}}$ m$^{{-2}}$ s$^{{-1}}$ sr$^{{-1}}$]")
    ax.set_title(rf"Modulated spectra, $\phi$ = {phi / cgs.GV:.2f} GV")
    if solved:
        ax.legend(loc="lower left", ncol=2)
    _style_axis(ax)
    return _finalize(fig, show, save_path)


def plot_chi2_data(chi2, phi: float | None = None, scale: float = 0.0,
                   show: bool = True, save_path: str | None = None):
    """
    Data of one observable with its asymmetric errors, and the model.

    scale = 0 plots the observable itself (B/C); use 2.7 for fluxes.
    """
    if phi is None:
        phi = chi2.phi
    R = np.array([d.R for d in chi2.data])
    F = np.array([d.F for d in chi2.data])
    err = np.array([[d.F_err_low for d in chi2.data], [d.F_err_high for d in chi2.data]])

    fig, ax = plt.subplots(figsize=(7, 5))
    if R.size:
        R_GV = R / cgs.GV
        weight = R_GV ** scale
        ax.errorbar(R_GV, weight * F, yerr=weight * err, fmt="o", color="black",
                    ms=4, capsize=2, label="data")
        R_model = np.logspace(np.log10(R.min()), np.log10(R.max()), 200)
        M = np.array([chi2.get_model(r, phi) for r in R_model])
        ax.plot(R_model / cgs.GV, (R_model / cgs.GV) ** scale * M, "-", color="black", lw=1,
                label=rf"model, $\phi$ = {phi / cgs.GV:.2f} GV")
        ax.set_xscale("log")
        ax.legend(loc="best")
    ax.set_xlabel("Rigidity [GV]")
    ax.set_ylabel(type(chi2).__name__.replace("Chi2", "") or "observable")
    _style_axis(ax)
    return _finalize(fig, show, save_path)
