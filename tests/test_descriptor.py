"""Tests for debug payload extraction and creator naming."""

import asyncio
from types import SimpleNamespace

from elsource.models import DescriptorPayload, NodeKind, StackPayload
from elsource.resolvers.descriptor import (
    find_node_with_debug_payload,
    get_debug_payload,
    is_vendored_path,
    node_file,
    resolve_component_name,
    resolve_descriptor_node,
)


def make_stack(file: str, line: int = 1, column: int = 1) -> str:
    return (
        "Error: react-stack-top-frame\n"
        "    at fakeJSXCallSite (/runtime/react.js:100:10)\n"
        f"    at Component ({file}:{line}:{column})"
    )


def component_name(node, **kwargs):
    return asyncio.run(resolve_component_name(node, **kwargs))


def source(file="/src/App.tsx", line=1, column=0):
    return {"fileName": file, "lineNumber": line, "columnNumber": column}


class TestNodeKind:
    def test_known_tags(self):
        assert NodeKind.of({"tag": 11}) is NodeKind.FORWARD_REF
        assert NodeKind.of({"tag": 5}).is_host

    def test_unknown_tags(self):
        assert NodeKind.of({"tag": 99}) is NodeKind.UNKNOWN
        assert NodeKind.of({"tag": True}) is NodeKind.UNKNOWN
        assert NodeKind.of({}) is NodeKind.UNKNOWN

    def test_only_forward_ref_is_wrapper(self):
        assert [kind for kind in NodeKind if kind.is_wrapper] == [NodeKind.FORWARD_REF]


class TestGetDebugPayload:
    def test_captured_error_object(self):
        payload = get_debug_payload({"_debugStack": SimpleNamespace(stack="trace")})
        assert payload == StackPayload(stack="trace")

    def test_stack_string_under_alternate_name(self):
        assert get_debug_payload({"debugStack": "trace"}) == StackPayload(stack="trace")

    def test_stack_wins_over_descriptor(self):
        payload = get_debug_payload({"_debugStack": {"stack": "trace"}, "_debugSource": source()})
        assert isinstance(payload, StackPayload)

    def test_descriptor(self):
        payload = get_debug_payload({"_debugSource": source("/src/A.tsx", 4, 2)})
        assert payload == DescriptorPayload(file="/src/A.tsx", line=4, column=2)

    def test_stack_without_text_falls_back_to_descriptor(self):
        payload = get_debug_payload({"_debugStack": {"message": "x"}, "debugSource": source()})
        assert isinstance(payload, DescriptorPayload)

    def test_missing(self):
        assert get_debug_payload({"tag": 5}) is None
        assert get_debug_payload(None) is None


class TestFindNodeWithDebugPayload:
    def test_node_itself(self):
        node = {"_debugSource": source()}
        assert find_node_with_debug_payload(node) is node

    def test_ascends_parent_chain(self):
        parent = {"_debugSource": source()}
        node = {"tag": 6, "return": {"tag": 5, "return": parent}}
        assert find_node_with_debug_payload(node) is parent

    def test_parent_preferred_over_sibling(self):
        parent = {"_debugSource": source("/src/Parent.tsx")}
        sibling = {"_debugSource": source("/src/Sibling.tsx")}
        node = {"return": parent, "sibling": sibling}
        assert find_node_with_debug_payload(node) is parent

    def test_sibling_when_parent_chain_exhausted(self):
        sibling = {"_debugSource": source()}
        node = {"tag": 6, "sibling": sibling}
        assert find_node_with_debug_payload(node) is sibling

    def test_depth_budget(self):
        nodes = [{"tag": 5} for _ in range(5)]
        for child, parent in zip(nodes, nodes[1:]):
            child["return"] = parent
        nodes[2]["_debugSource"] = source()
        assert find_node_with_debug_payload(nodes[0], max_depth=3) is nodes[2]
        assert find_node_with_debug_payload(nodes[0], max_depth=2) is None

    def test_cycle_terminates(self):
        node = {"tag": 5}
        node["return"] = node
        assert find_node_with_debug_payload(node) is None

    def test_wrapper_defers_to_creator(self):
        creator = {"tag": 0, "_debugSource": source("/src/Form.tsx")}
        wrapper = {"tag": 11, "_debugStack": {"stack": make_stack("/runtime/react.js")}, "_debugOwner": creator}
        assert find_node_with_debug_payload(wrapper) is creator

    def test_wrapper_keeps_itself_without_creator_payload(self):
        wrapper = {"tag": 11, "_debugSource": source(), "_debugOwner": {"tag": 0}}
        assert find_node_with_debug_payload(wrapper) is wrapper


class TestResolveDescriptorNode:
    def test_plain_node(self):
        node = {"tag": 0, "_debugOwner": {"tag": 0}}
        assert resolve_descriptor_node(node) is node

    def test_wrappers_are_substituted_transitively(self):
        component = {"tag": 0, "name": "Form"}
        inner = {"tag": 11, "_debugOwner": component}
        outer = {"tag": 11, "_debugOwner": inner}
        assert resolve_descriptor_node(outer) is component

    def test_node_created_by_wrapper(self):
        component = {"tag": 0, "name": "LoginForm"}
        wrapper = {"tag": 11, "_debugOwner": component}
        host = {"tag": 5, "_debugOwner": wrapper}
        assert resolve_descriptor_node(host) is component

    def test_wrapper_cycle_terminates(self):
        wrapper = {"tag": 11}
        wrapper["_debugOwner"] = wrapper
        assert resolve_descriptor_node(wrapper) is wrapper


class TestResolveComponentName:
    def test_creator_name(self):
        assert component_name({"_debugOwner": {"tag": 0, "name": "Card"}}) == "Card"

    def test_type_display_name(self):
        owner = {"tag": 1, "type": {"displayName": "FancyList", "name": "List"}}
        assert component_name({"_debugOwner": owner}) == "FancyList"

    def test_function_type(self):
        def HeroPost():
            pass

        assert component_name({"_debugOwner": {"tag": 0, "type": HeroPost}}) == "HeroPost"

    def test_host_type_is_not_a_name(self):
        owner = {"tag": 5, "type": "div", "_debugOwner": {"name": "Page"}}
        assert component_name({"_debugOwner": owner}) == "Page"

    def test_wrapper_named_by_render_function(self):
        wrapper = {"tag": 11, "type": {"render": {"name": "InputInner"}}}
        assert component_name({"_debugOwner": wrapper}) == "InputInner"

    def test_nameless_wrapper_is_skipped(self):
        wrapper = {"tag": 11, "type": {}, "_debugOwner": {"tag": 0, "name": "Form"}}
        assert component_name({"_debugOwner": wrapper}) == "Form"

    def test_vendored_creator_is_skipped(self):
        vendored = {
            "tag": 0,
            "name": "LinkComponent",
            "_debugStack": {"stack": make_stack("http://localhost:3000/node_modules/next/dist/client/link.js")},
            "_debugOwner": {"tag": 0, "name": "Header"},
        }
        assert component_name({"_debugOwner": vendored}) == "Header"

    def test_vendored_check_uses_resolved_file(self):
        chunk = "http://localhost:3000/_next/static/chunks/vendor_chunk.js"
        vendored = {
            "tag": 0,
            "name": "LinkComponent",
            "_debugStack": {"stack": make_stack(chunk)},
            "_debugOwner": {"tag": 0, "name": "Header"},
        }
        mapped = {chunk: "/proj/node_modules/next/dist/client/link.js"}

        async def resolve_file(node):
            return mapped.get(node_file(node))

        node = {"_debugOwner": vendored}
        assert component_name(node) == "LinkComponent"
        assert component_name(node, resolve_file=resolve_file) == "Header"

    def test_starts_at_creator(self):
        node = {"name": "Self", "_debugOwner": {"name": "Parent"}}
        assert component_name(node) == "Parent"

    def test_server_creator_field(self):
        node = {"owner": {"name": "Page"}}
        assert component_name(node, creator_field="owner") == "Page"
        assert component_name(node) is None

    def test_cycle_terminates(self):
        owner = {"tag": 0}
        owner["_debugOwner"] = owner
        assert component_name({"_debugOwner": owner}) is None

    def test_no_creator(self):
        assert component_name({"tag": 5}) is None


class TestVendoredPaths:
    def test_node_modules_segment(self):
        assert is_vendored_path("/p/node_modules/react/index.js")
        assert is_vendored_path("C:\\p\\node_modules\\x.js")
        assert not is_vendored_path("/p/src/node_modules_helper.ts")
        assert not is_vendored_path(None)

    def test_node_file_strips_query(self):
        node = {"_debugStack": {"stack": make_stack("http://localhost/src/A.tsx?t=9")}}
        assert node_file(node) == "http://localhost/src/A.tsx"
        assert node_file({"_debugSource": source("/src/B.tsx?x")}) == "/src/B.tsx"
        assert node_file({}) is None
