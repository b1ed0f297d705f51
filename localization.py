import logging

logger = logging.getLogger(__name__)


class Translator:
    def __init__(self) -> None:
        self.language = "en"
        self.translations = {
            "en": {},
            "pt": {
                "Sunday": "Domingo",
                "Monday": "Segunda",
                "Tuesday": "Terça",
                "Wednesday": "Quarta",
                "Thursday": "Quinta",
                "Friday": "Sexta",
                "Saturday": "Sábado",
                "Rest day": "Dia de descanso",
                "Groups": "Grupos",
                "No workout in progress": "Nenhum treino em andamento",
                "Workout in progress": "Treino em andamento",
                "Volume": "Volume",
                "Series": "Séries",
                "Minutes": "Minutos",
                "Long session": "Treino longo",
            },
        }

    @property
    def languages(self) -> list[str]:
        return sorted(self.translations)

    def set_language(self, lang: str) -> None:
        if lang not in self.translations:
            logger.warning("Unknown language %r, using English", lang)
            lang = "en"
        self.language = lang

    def gettext(self, key: str) -> str:
        return self.translations[self.language].get(key, key)


translator = Translator()
