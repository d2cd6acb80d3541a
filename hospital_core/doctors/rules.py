# hospital_core/doctors/rules.py
"""
The fixed set of medical specialties (stored verbatim).

Pure constants: importable without Django settings.
"""

SPECIALTIES = (
    "Cardiologia",
    "Dermatologia",
    "Endocrinologia",
    "Gastroenterologia",
    "Ginecologia",
    "Neurologia",
    "Oftalmologia",
    "Ortopedia",
    "Pediatria",
    "Psiquiatria",
    "Urologia",
    "Clínico Geral",
)
