from app.loader import load_bytes
from app.grouping import group_tiles
from app.render import dashboard_context, safe_href


def test_safe_href():
    assert safe_href("http://a") == "http://a"
    assert safe_href("HTTPS://a") == "HTTPS://a"
    assert safe_href("#") == "#"
    assert safe_href("/docs/page") == "/docs/page"
    assert safe_href("docs/page") == "docs/page"
    assert safe_href("") is None
    assert safe_href("javascript:alert(1)") is None
    assert safe_href("data:text/html,hi") is None


def test_dashboard_context():
    load = load_bytes(b"Title,Link,Icon,Taglines\nFoo,http://a,x.png,Ops\nBar,,https://i/b.png,Ops\n", "t.csv")
    context = dashboard_context(group_tiles(load.rows), load, "Links")
    assert context["title"] == "Links"
    assert context["status"] == {"source": "t.csv", "tiles": 2, "delimiter": "comma", "fallback": False}

    (section,) = context["sections"]
    assert section["tag"] == "Ops"
    foo, bar = section["tiles"]
    assert foo["href"] == "http://a"
    assert foo["icon"] == {"text": "x.png"}
    assert bar["href"] is None
    assert bar["icon"] == {"src": "https://i/b.png"}
