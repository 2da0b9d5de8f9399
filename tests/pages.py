"""HTML builders shared by the wikipull tests."""

from wikipull.conversion.normalizer import ReferenceNormalizer
from wikipull.conversion.sanitizer import DocumentSanitizer

BASE_URL = "https://zh.minecraft.wiki"


def wiki_page(body: str, title: str = "Creeper", chrome: str = "") -> str:
    """Wrap article HTML in the skeleton of a rendered MediaWiki page."""
    return f"""<!DOCTYPE html>
<html lang="zh">
<head><meta charset="utf-8"><title>{title} - Minecraft Wiki</title></head>
<body>
<div id="mw-head"></div>
<h1 id="firstHeading" class="firstHeading">{title}</h1>
<div id="contentSub">From Minecraft Wiki</div>
<div id="mw-content-text" class="mw-body-content"><div class="mw-parser-output">{body}</div></div>
{chrome}
</body>
</html>"""


def prepare(body: str, **normalizer_kwargs):
    """Sanitize and normalize a page body, returning the tree."""
    tree = DocumentSanitizer().sanitize(wiki_page(body))
    normalizer_kwargs.setdefault("base_url", BASE_URL)
    return ReferenceNormalizer(**normalizer_kwargs).normalize(tree)


FULL_BODY = """
<table class="infobox" style="width:300px">
  <caption>Creeper</caption>
  <tr><td colspan="2"><img src="/images/Creeper.png" width="200" height="300" alt="Creeper"></td></tr>
  <tr><th>Health</th><td>20</td></tr>
  <tr><th>Spawn</th><td>Overworld</td></tr>
</table>
<p>The <b>creeper</b> is a common <a href="/w/Hostile_mob" title="Hostile mob">hostile mob</a>.<sup id="cite_ref-1" class="reference"><a href="#cite_note-1">[1]</a></sup></p>
<div id="toc" class="toc" role="navigation">
  <input type="checkbox" role="button" id="toctogglecheckbox" class="toctogglecheckbox" style="display:none">
  <div class="toctitle"><h2 id="mw-toc-heading">Contents</h2><span class="toctogglespan"><label class="toctogglelabel" for="toctogglecheckbox"></label></span></div>
  <ul>
    <li class="toclevel-1"><a href="#Behavior"><span class="tocnumber">1</span> <span class="toctext">Behavior</span></a>
      <ul>
        <li class="toclevel-2"><a href="#Explosion"><span class="tocnumber">1.1</span> <span class="toctext">Explosion</span></a></li>
      </ul>
    </li>
    <li class="toclevel-1"><a href="#Drops"><span class="tocnumber">2</span> <span class="toctext">Drops</span></a></li>
  </ul>
</div>
<h2><span class="mw-headline" id="Behavior">Behavior</span><span class="mw-editsection"><span class="mw-editsection-bracket">[</span><a href="/w/index.php?title=Creeper&amp;action=edit&amp;section=1">edit</a><span class="mw-editsection-bracket">]</span></span></h2>
<p>Creepers approach the player and explode.</p>
<div class="thumb tright"><div class="thumbinner" style="width:182px"><a href="/w/File:Creeper_explosion.png" class="image"><img src="/images/thumb/Creeper_explosion.png" width="180" height="120"></a><div class="thumbcaption">A creeper exploding</div></div></div>
<h3 id="Explosion">Explosion</h3>
<p>See the <a href="https://www.example.com/creepers" class="external text" rel="nofollow">explosion study</a> for details.</p>
<p><img src="/images/Icon.png" width="16" height="16" alt="icon"> Small icon line.</p>
<h2 id="Drops">Drops</h2>
<table class="wikitable">
  <tr><th>Item</th><th>Count</th></tr>
  <tr><td>Gunpowder</td><td>0-2</td></tr>
  <tr><td>Music disc</td><td>1</td></tr>
</table>
<div class="navbox"><a href="/w/Mobs">Mobs</a> | <a href="/w/Zombie">Zombie</a></div>
<script>var x = 1;</script>
<style>.creeper { color: green; }</style>
"""

FULL_CHROME = """
<div id="catlinks" class="catlinks"><div id="mw-normal-catlinks"><a href="/w/Special:Categories">Categories</a>:
<ul><li><a href="/w/Category:Hostile_mobs" title="Category:Hostile mobs">Hostile mobs</a></li><li><a href="/w/Category:Overworld_mobs">Overworld mobs</a></li></ul></div></div>
<div id="p-lang"><ul><li><a href="https://minecraft.wiki/w/Creeper" hreflang="en">English</a></li></ul></div>
<ul id="footer-info"><li id="footer-info-lastmod">本页面最后编辑于2024年3月5日 (星期二) 10:00。</li></ul>
"""
