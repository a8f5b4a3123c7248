"""
cross_section_channels.py
----------------------------------------------------------------------
Partial (spallation) cross sections parent -> child on the ISM.

Each channel is keyed "<parent>_<child>" (e.g. "C12_B11") and stores the
high-energy cross section on hydrogen in mb, cumulative over short-lived
intermediate nuclei (e.g. C12 -> C11 -> B11 is booked under C12_B11).
The energy dependence below a few GeV/n follows the same low-energy
modulation as the total inelastic cross sections, and the He target is
included with the geometric overlap ratio of the parent:

    sigma_ISM(parent -> child; T) = sigma_H(T) (1 + f_He r_He(A_parent)) / (1 + f_He)

Two tables are available, selected by Params.id:
    0 : DEFAULT_CHANNELS
    1 : ALTERNATIVE_CHANNELS (different boron and beryllium normalisations)

Channels not listed are zero.
----------------------------------------------------------------------
"""

from __future__ import annotations

from typing import Dict, List

import cgs
from pid import PID
from total_inelastic import geometric_He_ratio, ism_average, letaw_energy_factor

# Type alias
ChannelTable = Dict[str, float]

# --- parent -> child, sigma on H at high energy [mb]
DEFAULT_CHANNELS: ChannelTable = {
    "O16_N15": 36.0, "O16_N14": 30.0, "O16_C14": 1.0, "O16_C13": 24.0, "O16_C12": 75.0,
    "O16_B11": 38.0, "O16_B10": 11.5,
    "O16_Be10": 2.0, "O16_Be9": 4.5, "O16_Be7": 9.5, "O16_Li7": 13.0, "O16_Li6": 14.0,
    "N15_N14": 34.0, "N15_C14": 2.5, "N15_C13": 30.0, "N15_C12": 40.0,
    "N15_B11": 34.0, "N15_B10": 9.0,
    "N14_C13": 22.0, "N14_C12": 60.0, "N14_B11": 32.0, "N14_B10": 10.5,
    "N14_Be10": 2.0, "N14_Be9": 4.0, "N14_Be7": 9.0, "N14_Li7": 12.0, "N14_Li6": 13.0,
    "C14_C13": 40.0, "C14_C12": 25.0, "C14_B11": 30.0, "C14_B10": 10.0,
    "C13_C12": 45.0, "C13_B11": 50.0, "C13_B10": 15.0,
    "C12_B11": 56.0, "C12_B10": 16.0,
    "C12_Be10": 4.0, "C12_Be9": 6.0, "C12_Be7": 10.0, "C12_Li7": 12.0, "C12_Li6": 13.0,
    "B11_B10": 32.0, "B11_Be10": 8.0, "B11_Be9": 10.0, "B11_Be7": 4.0, "B11_Li7": 12.0, "B11_Li6": 10.0,
    "B10_Be9": 8.0, "B10_Be7": 12.0, "B10_Li7": 8.0, "B10_Li6": 15.0,
}

ALTERNATIVE_CHANNELS: ChannelTable = {
    **DEFAULT_CHANNELS,
    "O16_B11": 33.0, "O16_B10": 13.0,
    "N14_B11": 29.0, "N14_B10": 11.5,
    "C12_B11": 60.0, "C12_B10": 13.5,
    "C13_B11": 44.0, "C13_B10": 16.5,
    "O16_Be10": 1.6, "O16_Be9": 5.0, "O16_Be7": 10.5,
    "C12_Be10": 3.6, "C12_Be9": 6.7, "C12_Be7": 9.2,
}


def channel_key(parent: PID, child: PID) -> str:
    return f"{parent.name}_{child.name}"


class SpallationXsecs:
    """
    Spallation cross sections producing one child species.

    Parameters
    ----------
    pid : PID
        The child species.
    alternative : bool
        Use ALTERNATIVE_CHANNELS (Params.id == 1) instead of DEFAULT_CHANNELS.
    """

    def __init__(self, pid: PID, alternative: bool = False):
        self.pid = pid
        self.alternative = alternative
        self.table: ChannelTable = ALTERNATIVE_CHANNELS if alternative else DEFAULT_CHANNELS
        self._He_ratio: Dict[int, float] = {}

    @classmethod
    def from_params(cls, pid: PID, table_id: int) -> "SpallationXsecs":
        return cls(pid, alternative=(table_id == 1))

    def sigma_H(self, parent: PID, T: float) -> float:
        """parent + p -> child [cm^2]."""
        if parent.is_tertiary or self.pid.is_tertiary:
            return 0.0
        sigma_mb = self.table.get(channel_key(parent, self.pid), 0.0)
        if sigma_mb == 0.0:
            return 0.0
        return sigma_mb * letaw_energy_factor(T) * cgs.mbarn

    def get_ISM(self, parent: PID, T: float) -> float:
        """parent + ISM -> child, per ISM atom [cm^2]."""
        sigma = self.sigma_H(parent, T)
        if sigma == 0.0:
            return 0.0
        ratio = self._He_ratio.get(parent.A)
        if ratio is None:
            ratio = self._He_ratio.setdefault(parent.A, geometric_He_ratio(parent.A))
        return ism_average(sigma, ratio)

    def channels(self) -> List[str]:
        """Keys of the channels feeding this child."""
        suffix = f"_{self.pid.name}"
        return sorted(k for k in self.table if k.endswith(suffix))
