"""
Implementation du parser de noms de releases de fansubs.

Ce module fournit GuessitTitleParser qui implemente ITitleParser.
guessit extrait les informations techniques (source, codecs, annee) ; les
conventions propres aux fansubs (groupe entre crochets en tete, saison
"第二季", sous-titres "简日双语", type "内嵌") sont traitees par regex.

Le titre retourne est toujours une sous-chaine du nom d'origine : il sert
ensuite d'index de correspondance pour les pulls suivants.
"""

import re
from typing import Any, Optional

from guessit import guessit
from guessit.api import GuessitException
from loguru import logger

from src.core.ports.parser import ITitleParser
from src.core.value_objects.parsed_info import ParsedTitle

GROUP_PATTERN = re.compile(r"^\s*[\[【]([^\]】]+)[\]】]")
EPISODE_PATTERNS = (
    re.compile(r"\s-\s(\d{1,4})(?:v\d)?(?=\s|\[|\(|$)"),
    re.compile(r"[\[【](\d{1,4})(?:v\d)?(?:\s?END)?[\]】]", re.IGNORECASE),
    re.compile(r"第(\d{1,4})[话話集]"),
    re.compile(r"\b[Ee][Pp]?(\d{1,4})\b"),
)
SEASON_PATTERN = re.compile(
    r"\s*(第([一二三四五六七八九十\d]{1,3})[季期]"
    r"|[Ss](?:eason\s*)?(\d{1,2})\b"
    r"|(\d{1,2})(?:st|nd|rd|th)\s+[Ss]eason)"
)
RESOLUTION_PATTERN = re.compile(r"(\d{3,4})[pP]|(\d{3,4})[xX×](\d{3,4})|\b(4[kK])\b")
SUB_PATTERN = re.compile(
    r"(简繁日双语|简繁日|简日双语|繁日双语|简繁双语|中日双语|简日|繁日|简繁|简体|繁体|"
    r"CHS&CHT|CHS|CHT|GB|BIG5|[简繁]中?)(?:内嵌|内封|外挂)?",
    re.IGNORECASE,
)
SUB_TYPE_PATTERN = re.compile(r"(内嵌|内封|外挂)")
TAG_PATTERN = re.compile(r"★[^★]*★")
NOISE_TOKENS = re.compile(r"(\d{1,2}月)?新番|合集|字幕组|招募")

CHINESE_NUMERALS = {
    "一": 1, "二": 2, "三": 3, "四": 4, "五": 5,
    "六": 6, "七": 7, "八": 8, "九": 9, "十": 10,
}


def chinese_to_int(value: str) -> Optional[int]:
    """Convertit "二", "十二", "12" en entier, None si non reconnu."""
    if value.isdigit():
        return int(value)
    if value in CHINESE_NUMERALS:
        return CHINESE_NUMERALS[value]
    if value.startswith("十") and len(value) == 2 and value[1] in CHINESE_NUMERALS:
        return 10 + CHINESE_NUMERALS[value[1]]
    if len(value) == 2 and value[1] == "十" and value[0] in CHINESE_NUMERALS:
        return CHINESE_NUMERALS[value[0]] * 10
    return None


class GuessitTitleParser(ITitleParser):
    """
    Parser de noms de releases combinant guessit et des regex fansub.

    Example:
        parser = GuessitTitleParser()
        parsed = parser.parse("[ABC] Frieren - 05 [1080p][CHS]")
        parsed.title, parsed.group, parsed.episode  # ("Frieren", "ABC", 5)
    """

    def parse(self, raw_name: str) -> Optional[ParsedTitle]:
        """
        Parse un nom de release.

        Args:
            raw_name: Nom brut

        Returns:
            ParsedTitle, ou None si aucun titre ne peut etre extrait
        """
        name = raw_name.strip()
        if not name:
            return None

        group = ""
        body = name
        group_match = GROUP_PATTERN.match(name)
        if group_match:
            group = group_match.group(1).strip()
            body = name[group_match.end():]

        episode, title_part = self._split_episode(body)
        guessed = self._guess(name)

        title = self._clean_title(title_part)
        if not title:
            guessed_title = str(guessed.get("title") or "")
            title = guessed_title if guessed_title and guessed_title in name else ""
        if not title:
            logger.debug("Titre introuvable", raw_name=raw_name)
            return None

        season, season_raw, title = self._extract_season(title)
        if not title:
            return None
        if episode == 0 and isinstance(guessed.get("episode"), int):
            episode = guessed["episode"]

        sub_match = SUB_PATTERN.search(body)
        sub_type_match = SUB_TYPE_PATTERN.search(body)

        return ParsedTitle(
            title=title,
            season=season,
            season_raw=season_raw,
            episode=episode,
            sub=sub_match.group(1) if sub_match else "",
            sub_type=sub_type_match.group(1) if sub_type_match else "",
            group=group,
            resolution=self._extract_resolution(name, guessed),
            source=self._as_text(guessed.get("source")),
            audio_info=self._as_text(guessed.get("audio_codec")),
            video_info=self._as_text(guessed.get("video_codec")),
            year=guessed.get("year") if isinstance(guessed.get("year"), int) else None,
        )

    def _guess(self, name: str) -> dict[str, Any]:
        """Appelle guessit en mode episode ; dict vide si guessit echoue."""
        try:
            return dict(guessit(name, {"type": "episode"}))
        except GuessitException as e:
            logger.debug("guessit a echoue", name=name, error=str(e))
            return {}

    def _split_episode(self, body: str) -> tuple[int, str]:
        """
        Separe le numero d'episode et la partie titre qui le precede.

        Returns:
            (episode, partie_titre) ; episode vaut 0 si aucun marqueur trouve,
            auquel cas la partie titre est le texte avant le premier crochet
            technique.
        """
        for pattern in EPISODE_PATTERNS:
            match = pattern.search(body)
            if match and match.start() > 0:
                return int(match.group(1)), body[: match.start()]
        return 0, body

    def _clean_title(self, title_part: str) -> str:
        """
        Nettoie la partie titre.

        Retire les etiquettes ★...★ et les crochets, ecarte les jetons de
        bruit ("10月新番"), puis garde le premier titre d'une liste
        "titre / alias". Le resultat reste une sous-chaine du nom.
        """
        text = TAG_PATTERN.sub(" ", title_part)
        tokens = [t.strip() for t in re.split(r"[\[\]【】()（）]", text)]
        tokens = [t for t in tokens if t and not NOISE_TOKENS.fullmatch(t)]
        if not tokens:
            return ""
        # Format "[Groupe][Titre][05]" : le titre est le dernier jeton avant l'episode
        candidate = tokens[-1]
        for separator in ("/", "|"):
            if separator in candidate:
                parts = [p.strip() for p in candidate.split(separator) if p.strip()]
                candidate = parts[0] if parts else ""
        return candidate.strip(" -_")

    def _extract_season(self, title: str) -> tuple[int, str, str]:
        """
        Extrait la saison ecrite dans le titre.

        Returns:
            (saison, saison_telle_qu_ecrite, titre_sans_la_saison)
        """
        match = SEASON_PATTERN.search(title)
        if not match:
            return 1, "", title

        raw = match.group(1).strip()
        number = match.group(2) or match.group(3) or match.group(4)
        season = chinese_to_int(number) if number else None
        cleaned = title[: match.start()].strip(" -_")
        if not cleaned:
            # Titre entierement constitue du marqueur : on le garde tel quel
            return season or 1, raw, title
        return season or 1, raw, cleaned

    def _extract_resolution(self, name: str, guessed: dict[str, Any]) -> str:
        """Resolution normalisee ("1080p"), via regex puis guessit."""
        match = RESOLUTION_PATTERN.search(name)
        if match:
            if match.group(1):
                return f"{match.group(1)}p"
            if match.group(3):
                return f"{match.group(3)}p"
            return "2160p"
        return self._as_text(guessed.get("screen_size"))

    def _as_text(self, value: Any) -> str:
        """Convertit une valeur guessit (str, objet ou liste) en texte."""
        if value is None:
            return ""
        if isinstance(value, list):
            return " ".join(str(v) for v in value)
        return str(value)
