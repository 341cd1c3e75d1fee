"""
Entites representant les releases recues des flux RSS et les abonnements.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Torrent:
    """
    Une entree de flux RSS (une release telechargeable).

    Deduplique par URL. L'etat de telechargement et de renommage evolue
    en place au fil du traitement.

    Attributs :
        id : ID interne
        name : Nom de la release (normalise)
        url : URL du .torrent (ou magnet), cle de deduplication
        homepage : Page de la release sur le tracker (permet la recherche Mikan)
        download_uid : Identifiant cote client de telechargement
        downloaded : Telechargement termine
        renamed : Fichier renomme
        bangumi_id : Bangumi proprietaire, une fois resolu
        rss_link : Flux d'origine
    """

    name: str
    url: str
    id: Optional[int] = None
    homepage: str = ""
    download_uid: str = ""
    downloaded: bool = False
    renamed: bool = False
    bangumi_id: Optional[int] = None
    rss_link: str = ""


@dataclass
class RSSItem:
    """
    Abonnement a un flux RSS.

    Attributs :
        id : ID interne
        name : Nom affiche
        url : URL du flux (unique)
        enabled : Flux actif lors des rafraichissements
        aggregate : Flux agregeant plusieurs bangumis
        parser : Source de metadonnees a utiliser pour ce flux
    """

    url: str
    name: str = ""
    id: Optional[int] = None
    enabled: bool = True
    aggregate: bool = True
    parser: str = "mikan"
