"""One recognizer per block-presence idiom. Each returns an Occurrence or None."""

from typing import Optional

from block_given_linter.domain.entities import Idiom, Occurrence
from block_given_linter.domain.syntax import NodeKind, SyntaxNode, SyntaxTree

BLOCK_GIVEN_METHOD = "block_given?"


def match_block_given_call(node: SyntaxNode) -> Optional[Occurrence]:
    """`block_given?`: receiverless, argumentless send. Shape (send nil :block_given?)."""
    if node.kind != NodeKind.SEND or len(node.children) != 2:
        return None
    receiver, method_name = node.children
    if receiver is not None or method_name != BLOCK_GIVEN_METHOD:
        return None
    return Occurrence(node=node, idiom=Idiom.BLOCK_GIVEN_CALL)


def match_defined_yield_probe(node: SyntaxNode) -> Optional[Occurrence]:
    """`defined?(yield)`. Shape (defined? (yield ...)); yield arguments are never evaluated."""
    if node.kind != NodeKind.DEFINED:
        return None
    operand = node.child(0)
    # (defined? (begin (yield))) when the parser keeps the parentheses.
    while (
        isinstance(operand, SyntaxNode)
        and operand.kind == NodeKind.BEGIN
        and len(operand.children) == 1
    ):
        operand = operand.child(0)
    if not isinstance(operand, SyntaxNode) or operand.kind != NodeKind.YIELD:
        return None
    return Occurrence(node=node, idiom=Idiom.DEFINED_YIELD_PROBE)


def match_block_truthy_ref(
    node: SyntaxNode, tree: SyntaxTree, block_param_name: Optional[str]
) -> Optional[Occurrence]:
    """
    `block` used as a condition, where `block` is the method's `&block` parameter.

    block_param_name must already be gated by the caller: None when the method
    has no explicit block parameter or reassigns it.
    """
    if block_param_name is None or node.kind != NodeKind.LVAR:
        return None
    if node.child(0) != block_param_name:
        return None
    if not in_truthiness_position(node, tree):
        return None
    if is_shadowed(node, tree, block_param_name):
        return None
    return Occurrence(
        node=node, idiom=Idiom.BLOCK_TRUTHY_REF, referenced_name=block_param_name)


def in_truthiness_position(node: SyntaxNode, tree: SyntaxTree) -> bool:
    """True if the node's value is only ever used as a boolean."""
    parent = tree.parent(node)
    if parent is None:
        return False
    if parent.kind == NodeKind.IF or parent.kind in NodeKind.LOOPS:
        return parent.child(0) is node
    if parent.kind == NodeKind.SEND:
        # !block / not block => (send (lvar :block) :!)
        return len(parent.children) == 2 and parent.child(0) is node and parent.child(1) == "!"
    if parent.kind in NodeKind.BOOLEAN_OPERATORS:
        return in_truthiness_position(parent, tree)
    if parent.kind == NodeKind.BEGIN and len(parent.children) == 1:
        return in_truthiness_position(parent, tree)
    return False


def is_shadowed(node: SyntaxNode, tree: SyntaxTree, name: str) -> bool:
    """True if a Ruby block between node and its method redeclares `name` as a parameter."""
    previous = node
    for ancestor in tree.ancestors(node):
        if ancestor.kind in NodeKind.METHOD_DEFINITIONS:
            return False
        if ancestor.kind == NodeKind.BLOCK and previous is not ancestor.child(0):
            if name in _block_parameter_names(ancestor.child(1)):
                return True
        previous = ancestor
    return False


def _block_parameter_names(args: object) -> set[str]:
    if not isinstance(args, SyntaxNode):
        return set()
    names: set[str] = set()
    for param in args.descendants():
        if param.kind in NodeKind.NAMED_PARAMETERS and isinstance(param.child(0), str):
            names.add(str(param.child(0)))
    return names
