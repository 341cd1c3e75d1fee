"""
Bangumi RSS - suivi des flux RSS de releases d'anime.

Ce package rattache les releases des flux de fansubs a leur bangumi
(identite canonique dedupliquee, liee a Mikan et a TMDB) et decouvre
les nouveaux bangumis a partir des releases inconnues.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, objets valeur)
- services/ : Couche application (rafraichissement, resolution, fusion)
- adapters/ : Couche infrastructure (CLI, clients API, flux RSS, parsing)
- infrastructure/ : Persistance SQLite
"""
