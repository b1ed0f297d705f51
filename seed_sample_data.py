from catalog_service import CatalogService
from models import CARDIO

DEFAULT_CATEGORIES = [
    ("Peito", "A"),
    ("Tríceps", "A"),
    ("Costas", "B"),
    ("Bíceps", "B"),
    ("Pernas", "C"),
    ("Ombros", "C"),
    ("Abdômen", "D"),
    ("Cardio", "D"),
]

SAMPLE_EXERCISES = {
    "Peito": [("Supino Reto", 20.0), ("Crucifixo", 10.0)],
    "Tríceps": [("Tríceps Corda", 15.0)],
    "Costas": [("Puxada Frontal", 30.0)],
    "Bíceps": [("Rosca Direta", 10.0)],
    "Pernas": [("Agachamento", 40.0)],
    "Ombros": [("Desenvolvimento", 12.0)],
    "Abdômen": [("Prancha", 0.0)],
}


def seed(catalog: CatalogService) -> bool:
    """Fill an empty catalog with the default categories and a few exercises."""
    if catalog.state.categories or catalog.state.exercises:
        return False
    ids = {}
    for name, group in DEFAULT_CATEGORIES:
        ids[name] = catalog.add_category(name, group).id
    for cat_name, exercises in SAMPLE_EXERCISES.items():
        for ex_name, load in exercises:
            catalog.add_exercise(ex_name, [ids[cat_name]], initial_load=load)
    catalog.add_exercise("Esteira", [ids["Cardio"]], type=CARDIO, default_sets=0)
    for day, group in ((1, "A"), (2, "B"), (3, "C"), (4, "D")):
        catalog.toggle_schedule(day, group)
    return True
