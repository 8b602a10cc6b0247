from __future__ import annotations

from pathlib import Path

import pytest

from docmerge.session import reset_session


QUERYABLE_JS = r"""(function() {var implementors = {};
implementors["diesel"] = [];
implementors["syncstorage"] = [{text:"impl&lt;__DB:&nbsp;<a class=\"trait\" href=\"diesel/backend/trait.Backend.html\" title=\"trait diesel::backend::Backend\">Backend</a>, __ST&gt; <a class=\"trait\" href=\"diesel/deserialize/trait.Queryable.html\" title=\"trait diesel::deserialize::Queryable\">Queryable</a>&lt;__ST, __DB&gt; for <a class=\"struct\" href=\"syncstorage/db/params/struct.Batch.html\" title=\"struct syncstorage::db::params::Batch\">Batch</a>",synthetic:false,types:["syncstorage::db::params::Batch"]},{text:"impl Queryable for SyncTimestamp",synthetic:true,types:["syncstorage::db::util::SyncTimestamp"]},];

            if (window.register_implementors) {
                window.register_implementors(implementors);
            } else {
                window.pending_implementors = implementors;
            }
        
})()
"""

SERIALIZE_JS = r"""(function() {
    var implementors = Object.fromEntries([["mycrate",[["impl Serialize for Config",false,["mycrate::Config"]],["impl Serialize for Wrapper",1,["mycrate::Wrapper"]]]]]);
    if (window.register_implementors) { window.register_implementors(implementors); } else { window.pending_implementors = implementors; }
})()
"""

ACTIX_SIDEBAR_JS = (
    'initSidebarItems({"enum":[["Binary","Represents various types of binary body."],'
    '["Body","Represents various types of http message body."]],'
    '"macro":[["header",""]],"mod":[["client","Http client api"]],'
    '"struct":[["App","Structure that follows the builder pattern."]],'
    '"trait":[["Responder","Trait implemented by types that generate responses for clients."]],'
    '"type":[["FutureResponse","Convenience type alias"]]});'
)

HELPER_TYPES_SIDEBAR_JS = (
    'initSidebarItems({"type":[["And","The return type of `lhs.and(rhs)`"],'
    '["Asc","The return type of `expr.asc()`"]]});'
)

TOKIO_SIDEBAR_JS = 'window.SIDEBAR_ITEMS = {"fn":["spawn"],"struct":["Runtime","Builder"]};'


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def doc_tree(tmp_path: Path) -> Path:
    root = tmp_path / "doc"
    _write(root / "implementors" / "diesel" / "deserialize" / "trait.Queryable.js", QUERYABLE_JS)
    _write(root / "implementors" / "serde" / "ser" / "trait.Serialize.js", SERIALIZE_JS)
    _write(root / "actix_web" / "sidebar-items.js", ACTIX_SIDEBAR_JS)
    _write(root / "diesel" / "helper_types" / "sidebar-items.js", HELPER_TYPES_SIDEBAR_JS)
    _write(root / "tokio" / "runtime" / "sidebar-items.js", TOKIO_SIDEBAR_JS)
    return root


@pytest.fixture
def broken_tree(doc_tree: Path) -> Path:
    _write(
        doc_tree / "implementors" / "broken" / "trait.Broken.js",
        'implementors["broken"] = [{text:"never closed"',
    )
    _write(doc_tree / "gadgets" / "sidebar-items.js", 'initSidebarItems({"gadget":[["X",""]]});')
    return doc_tree


@pytest.fixture
def fresh_session():
    """Give each test its own process-wide default session."""
    session = reset_session()
    yield session
    reset_session()
