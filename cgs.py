# cgs.py
# ---------------------------------------------------------------------
# Units and physical constants in the CGS system.
#
# Every quantity inside the solver is CGS: energies in erg, lengths in cm,
# times in s, masses in g, cross sections in cm^2. Rigidity is carried in
# energy units per unit charge (R = pc / Z), hence GV == GeV.
#
# Usage:
#     T = 10.0 * cgs.GeV
#     X_g_cm2 = X / (cgs.gram / cgs.cm2)
# ---------------------------------------------------------------------

# --- base units
cm = 1.0
sec = 1.0
gram = 1.0
erg = 1.0

# --- derived
cm2 = cm * cm
cm3 = cm * cm * cm
m = 1e2 * cm
m2 = m * m
km = 1e5 * cm
mgram = 1e-3 * gram
year = 3.15576e7 * sec
pc = 3.0856775807e18 * cm
kpc = 1e3 * pc
mbarn = 1e-27 * cm2

# --- energy
eV = 1.602176634e-12 * erg
keV = 1e3 * eV
MeV = 1e6 * eV
GeV = 1e9 * eV
TeV = 1e12 * eV
GV = GeV  # rigidity, energy per unit charge

# --- constants
c_light = 2.99792458e10 * cm / sec
proton_mass_c2 = 938.272088 * MeV
electron_mass_c2 = 0.51099895 * MeV
proton_mass = 1.67262192369e-24 * gram

# --- interstellar medium
f_He = 0.1           # He/H number ratio
K_He = 3.5           # sigma(p He) / sigma(p p), inelastic
inelasticity = 0.5   # mean energy fraction kept by the leading proton
mean_ism_mass = proton_mass * (1.0 + 4.0 * f_He) / (1.0 + f_He)  # per ISM atom
