"""
Tests unitaires pour GuessitTitleParser.

Ces tests verifient:
- L'extraction du groupe de fansub ([..] ou 【..】)
- L'extraction du titre, toujours sous-chaine du nom d'origine
- Les marqueurs d'episode (" - 05", "[05]", "第05话")
- La saison ("第二季", "S2", "2nd Season")
- Les sous-titres (langue et type) et la resolution
"""

import pytest

from src.adapters.parsing.title_parser import GuessitTitleParser, chinese_to_int
from src.core.ports.parser import ITitleParser


@pytest.fixture
def parser() -> GuessitTitleParser:
    return GuessitTitleParser()


class TestInterface:
    def test_implements_interface(self, parser: GuessitTitleParser):
        assert isinstance(parser, ITitleParser)


class TestBasicNames:
    """Noms de releases courants."""

    def test_dash_episode(self, parser: GuessitTitleParser):
        name = "[ABC] Frieren - 05 [1080p][CHS]"
        parsed = parser.parse(name)

        assert parsed.title == "Frieren"
        assert parsed.group == "ABC"
        assert parsed.episode == 5
        assert parsed.season == 1
        assert parsed.resolution == "1080p"
        assert parsed.sub == "CHS"

    def test_bracket_format_with_tags(self, parser: GuessitTitleParser):
        name = "【喵萌奶茶屋】★10月新番★[葬送的芙莉莲 / Sousou no Frieren][05][1080p][简日双语]"
        parsed = parser.parse(name)

        assert parsed.group == "喵萌奶茶屋"
        assert parsed.title == "葬送的芙莉莲"
        assert parsed.episode == 5
        assert parsed.sub == "简日双语"

    def test_chinese_episode_marker(self, parser: GuessitTitleParser):
        parsed = parser.parse("[ABC] 葬送的芙莉莲 第05话 [1080p]")

        assert parsed.title == "葬送的芙莉莲"
        assert parsed.episode == 5

    @pytest.mark.parametrize(
        "name",
        [
            "[ABC] Frieren - 05 [1080p][CHS]",
            "【喵萌奶茶屋】★10月新番★[葬送的芙莉莲 / Sousou no Frieren][05][1080p][简日双语]",
            "[XYZ] Frieren 第二季 - 03 [1080p]",
            "[ABC] Kusuriya no Hitorigoto 2nd Season - 13 [1080p]",
        ],
    )
    def test_title_is_substring_of_name(self, parser: GuessitTitleParser, name: str):
        """Le titre sert d'index de correspondance : il doit figurer dans le nom."""
        parsed = parser.parse(name)
        assert parsed.title in name
        assert parsed.group in name


class TestSeason:
    """Extraction de la saison."""

    def test_chinese_season(self, parser: GuessitTitleParser):
        parsed = parser.parse("[XYZ] Frieren 第二季 - 03 [1080p]")

        assert parsed.title == "Frieren"
        assert parsed.season == 2
        assert parsed.season_raw == "第二季"
        assert parsed.episode == 3

    def test_short_season(self, parser: GuessitTitleParser):
        parsed = parser.parse("[ABC] Frieren S2 - 03 [1080p]")

        assert parsed.title == "Frieren"
        assert parsed.season == 2
        assert parsed.season_raw == "S2"

    def test_ordinal_season(self, parser: GuessitTitleParser):
        parsed = parser.parse("[ABC] Kusuriya no Hitorigoto 2nd Season - 13 [1080p]")

        assert parsed.title == "Kusuriya no Hitorigoto"
        assert parsed.season == 2


class TestSubtitlesAndResolution:
    def test_sub_type(self, parser: GuessitTitleParser):
        parsed = parser.parse("[ABC] Frieren - 05 [1080p][简体内嵌]")

        assert parsed.sub == "简体"
        assert parsed.sub_type == "内嵌"

    def test_dimension_resolution(self, parser: GuessitTitleParser):
        parsed = parser.parse("[ABC] Frieren - 05 [WebRip 1920x1080 HEVC AAC]")
        assert parsed.resolution == "1080p"

    def test_4k_resolution(self, parser: GuessitTitleParser):
        parsed = parser.parse("[ABC] Frieren - 05 [4K]")
        assert parsed.resolution == "2160p"

    def test_to_episode_metadata_dedup_key(self, parser: GuessitTitleParser):
        parsed = parser.parse("[ABC] Frieren - 05 [1080p][简体内嵌]")
        meta = parsed.to_episode_metadata()
        assert meta.dedup_key == ("Frieren", 1, "ABC", "1080p", "内嵌")


class TestUnparseable:
    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_names(self, parser: GuessitTitleParser, name: str):
        assert parser.parse(name) is None


class TestChineseToInt:
    @pytest.mark.parametrize(
        "value,expected",
        [("二", 2), ("十", 10), ("十二", 12), ("二十", 20), ("12", 12), ("百", None)],
    )
    def test_conversion(self, value: str, expected):
        assert chinese_to_int(value) == expected
