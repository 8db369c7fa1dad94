from schema_typegen.type_codegen.ir import ANY, NUMBER, STRING, Declaration, NamespaceNode
from schema_typegen.type_codegen.tree import assemble


def _declaration(name: str) -> Declaration:
    return Declaration(name, ANY)


class TestAssemble:
    def test_path_depth(self):
        tree = assemble([(("components", "schemas", "User"), _declaration("User"))])

        assert tree.name == ""
        assert [node.name for node in tree.children] == ["Components"]
        schemas = tree.children[0].children[0]
        assert schemas.name == "Schemas"
        assert schemas.children == []
        assert schemas.declarations == [_declaration("User")]

    def test_shared_prefixes_share_namespaces(self):
        tree = assemble([
            (("components", "schemas", "User"), _declaration("User")),
            (("components", "responses", "Error"), _declaration("Error")),
            (("components", "schemas", "Group"), _declaration("Group")),
        ])

        components = tree.children[0]
        assert [node.name for node in components.children] == ["Schemas", "Responses"]
        assert [d.name for d in components.children[0].declarations] == ["User", "Group"]

    def test_single_segment_lands_at_root(self):
        tree = assemble([(("Limit",), Declaration("Limit", NUMBER, exported=False))])

        assert tree.children == []
        assert tree.declarations == [Declaration("Limit", NUMBER, exported=False)]

    def test_mixed_depths(self):
        tree = assemble([
            (("API", "getPing", "Input"), _declaration("Input")),
            (("API", "getPing", "Responses", "$200"), _declaration("$200")),
            (("API", "getPing", "Output"), _declaration("Output")),
        ])

        operation = tree.children[0].children[0]
        assert operation.name == "GetPing"
        assert [d.name for d in operation.declarations] == ["Input", "Output"]
        assert operation.children[0].name == "Responses"
        assert operation.children[0].declarations == [_declaration("$200")]

    def test_segments_merge_by_identifier(self):
        tree = assemble([
            (("definitions", "A"), _declaration("A")),
            (("Definitions", "B"), _declaration("B")),
        ])

        assert len(tree.children) == 1
        assert [d.name for d in tree.children[0].declarations] == ["A", "B"]

    def test_custom_identifier_builder(self):
        tree = assemble([(("defs", "a"), _declaration("a"))], build_identifier=str.upper)
        assert tree.children[0].name == "DEFS"

    def test_empty(self):
        assert assemble([]) == NamespaceNode(name="")


class TestNamespaceNode:
    def test_find_and_iter(self):
        tree = assemble([
            (("definitions", "A"), Declaration("A", STRING)),
            (("Root",), Declaration("Root", NUMBER, exported=False)),
        ])

        assert tree.find("Definitions", "A") == Declaration("A", STRING)
        assert tree.find("Root") == Declaration("Root", NUMBER, exported=False)
        assert tree.find("Missing", "A") is None
        assert [(path, d.name) for path, d in tree.iter_declarations()] == [
            ((), "Root"),
            (("Definitions",), "A"),
        ]
