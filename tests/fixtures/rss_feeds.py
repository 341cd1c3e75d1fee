"""
Flux RSS 2.0 pour les tests du client de flux.
"""

MIKAN_FEED = """<?xml version="1.0" encoding="utf-8"?>
<rss version="2.0">
  <channel>
    <title>Mikan Project - 我的番组</title>
    <link>http://mikanani.me/RSS/MyBangumi?token=abc</link>
    <item>
      <guid isPermaLink="false">[ABC] Frieren - 05 [1080p][CHS]</guid>
      <link>https://mikanani.me/Home/Episode/aaa111</link>
      <title>[ABC]  Frieren - 05 [1080p][CHS]</title>
      <description>[ABC] Frieren - 05 [1080p][CHS][350.2 MB]</description>
      <enclosure type="application/x-bittorrent" length="367212032"
                 url="https://mikanani.me/Download/20231006/aaa111.torrent" />
    </item>
    <item>
      <guid isPermaLink="false">【喵萌奶茶屋】★10月新番★[葬送的芙莉莲 / Sousou no Frieren][05][1080p][简日双语]</guid>
      <link>https://mikanani.me/Home/Episode/bbb222</link>
      <title>【喵萌奶茶屋】★10月新番★[葬送的芙莉莲 / Sousou no Frieren][05][1080p][简日双语]</title>
      <enclosure type="application/x-bittorrent" length="1"
                 url="https://mikanani.me/Download/20231006/bbb222.torrent" />
    </item>
    <item>
      <title></title>
      <link>https://mikanani.me/Home/Episode/ccc333</link>
    </item>
  </channel>
</rss>
"""

SINGLE_ITEM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<rss version="2.0">
  <channel>
    <title>nyaa</title>
    <item>
      <title>[XYZ] Dungeon Meshi - 12 [1080p]</title>
      <link>https://nyaa.si/download/1750000.torrent</link>
    </item>
  </channel>
</rss>
"""

EMPTY_FEED = """<?xml version="1.0" encoding="utf-8"?>
<rss version="2.0"><channel><title>vide</title></channel></rss>
"""
