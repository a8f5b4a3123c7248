"""
run_chi2.py
----------------------------------------------------------------------
Propagate a set of species and print the chi^2/ndof of the C, O and B/C
observables against data files.

Example:
    python run_chi2.py --species C12,C13,C14,N14,N15,O16,B10,B11 \
        --data-C data/C.txt --data-BC data/BC.txt --units 1e-4 --phi 0.6

--units converts the C and O flux files; the B/C file is a plain ratio.

Energies are given in GeV (per nucleon), rigidities and the modulation
potential in GV; every other flag uses the unit named in its help text.
----------------------------------------------------------------------
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Dict, List, Optional, Sequence, Tuple

import cgs
from chi2 import Chi2, Chi2BC, Chi2C, Chi2O
from errors import CRPropagationError
from interpolation import LogAxis
from params import Params
from particle import Particle
from particles import Particles
from pid import PID

logger = logging.getLogger(__name__)

# fraction of the SN energy injected into each primary
DEFAULT_EFFICIENCIES: Dict[str, float] = {
    "H1": 6e-2,
    "He4": 8e-3,
    "C12": 2.5e-4,
    "N14": 3e-5,
    "O16": 3.5e-4,
}
DEFAULT_SPECIES = "C12,C13,C14,N14,N15,O16,B10,B11"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Cosmic-ray propagation and chi^2 against data.")
    # propagation
    parser.add_argument("--D0", type=float, default=2.5e28, help="diffusion normalization [cm^2/s]")
    parser.add_argument("--delta", type=float, default=0.5, help="low-rigidity slope of D")
    parser.add_argument("--ddelta", type=float, default=0.2, help="slope change at the break")
    parser.add_argument("--smoothness", type=float, default=0.1, help="break smoothness")
    parser.add_argument("--Rb", type=float, default=312.0, help="break rigidity [GV]")
    parser.add_argument("--vA", type=float, default=5.0, help="Alfven velocity [km/s]")
    parser.add_argument("--H", type=float, default=4.0, help="halo half-height [kpc]")
    parser.add_argument("--mu", type=float, default=2.3, help="disc surface density [mg/cm^2]")
    parser.add_argument("--Xs", type=float, default=0.2, help="grammage at source [g/cm^2]")
    parser.add_argument("--id", type=int, default=0, choices=(0, 1), help="spallation table")
    parser.add_argument("--slope", type=float, default=4.2, help="injection slope in momentum")
    # species and grid
    parser.add_argument("--species", type=str, default=DEFAULT_SPECIES,
                        help="comma-separated species, e.g. C12,O16,B11")
    parser.add_argument("--efficiency", action="append", default=[], metavar="NAME=VALUE",
                        help="override an injection efficiency, may be repeated")
    parser.add_argument("--size", type=int, default=20, help="number of energies in the grid")
    parser.add_argument("--Tmin", type=float, default=1.0, help="lowest energy [GeV/n]")
    parser.add_argument("--Tmax", type=float, default=1e4, help="highest energy [GeV/n]")
    # chi2
    parser.add_argument("--phi", type=float, default=0.6, help="modulation potential [GV]")
    parser.add_argument("--Rmin", type=float, default=2.0, help="lowest data rigidity [GV]")
    parser.add_argument("--Rmax", type=float, default=1e3, help="highest data rigidity [GV]")
    parser.add_argument("--data-C", type=str, default="", help="carbon flux data file")
    parser.add_argument("--data-O", type=str, default="", help="oxygen flux data file")
    parser.add_argument("--data-BC", type=str, default="", help="B/C ratio data file")
    parser.add_argument("--units", type=float, default=1.0,
                        help="multiplier from file flux units to cm^-2 s^-1 sr^-1 GeV^-1")
    # output
    parser.add_argument("--dump", type=str, default="", help="directory for per-species dumps")
    parser.add_argument("--plot", action="store_true", help="plot the modulated spectra")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def params_from_args(args: argparse.Namespace) -> Params:
    return Params(
        D_0=args.D0 * cgs.cm2 / cgs.sec,
        delta=args.delta,
        ddelta=args.ddelta,
        smoothness=args.smoothness,
        R_b=args.Rb * cgs.GV,
        v_A=args.vA * cgs.km / cgs.sec,
        H=args.H * cgs.kpc,
        mu=args.mu * cgs.mgram / cgs.cm2,
        X_s=args.Xs * cgs.gram / cgs.cm2,
        id=args.id,
        injection_slope=args.slope,
    )


def parse_efficiencies(overrides: Sequence[str]) -> Dict[str, float]:
    efficiencies = dict(DEFAULT_EFFICIENCIES)
    for item in overrides:
        name, sep, value = item.partition("=")
        if not sep:
            raise ValueError(f"efficiency override must be NAME=VALUE, got {item!r}")
        efficiencies[PID.from_name(name).name] = float(value)
    return efficiencies


def make_particles(species: str, efficiencies: Dict[str, float]) -> Particles:
    pids = [PID.from_name(name) for name in species.split(",") if name.strip()]
    return Particles(Particle(pid, efficiencies.get(pid.name, 0.0)) for pid in pids)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        params = params_from_args(args)
        particles = make_particles(args.species, parse_efficiencies(args.efficiency))
        T = LogAxis(args.Tmin * cgs.GeV, args.Tmax * cgs.GeV, args.size)
        if args.phi < 0.0:
            raise ValueError(f"modulation potential must be non-negative, got {args.phi}")
    except (CRPropagationError, ValueError) as exc:
        logger.error("invalid input: %s", exc)
        return 2

    phi = args.phi * cgs.GV
    # B/C is a ratio: --units does not apply to it
    loaders = (
        ("C", Chi2C, args.data_C, args.units),
        ("O", Chi2O, args.data_O, args.units),
        ("B/C", Chi2BC, args.data_BC, 1.0),
    )
    observables: List[Tuple[str, Chi2]] = []
    try:
        for name, cls, filename, units in loaders:
            if not filename:
                continue
            chi2 = cls(particles, phi)
            if chi2.read_datafile(filename, units) > 0:
                observables.append((name, chi2))
    except CRPropagationError as exc:
        logger.error("invalid data file: %s", exc)
        return 2

    logger.info("propagating %s", ", ".join(p.name for p in particles.pids))
    if not particles.run(T, params):
        logger.warning("some species failed, their observables are incomplete")

    if args.dump:
        particles.dump(args.dump)

    R_min, R_max = args.Rmin * cgs.GV, args.Rmax * cgs.GV
    for name, chi2 in observables:
        try:
            value = chi2.compute_chi2(R_min, R_max)
        except CRPropagationError as exc:
            logger.error("%s: %s", name, exc)
            continue
        print(f"chi2/ndof {name:>3s} = {value:.4f}  ({chi2.size} points)")

    if args.plot:
        from utils.particle_plot_utils import plot_chi2_data, plot_particle_spectra

        plot_particle_spectra(particles, phi)
        for _, chi2 in observables:
            plot_chi2_data(chi2)
    return 0


if __name__ == "__main__":
    sys.exit(main())
