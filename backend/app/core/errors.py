"""Error taxonomy for dialogue loading, graph building and editing."""


class DialogueError(Exception):
    """Base class for all dialogue editor errors."""


class StructureError(DialogueError):
    """The document cannot be turned into a graph (e.g. no "start" node)."""


class StorageError(DialogueError):
    """Reading or writing the dialogue file failed."""


class DocumentParseError(StorageError):
    """The dialogue file is not valid JSON or not a mapping of node records."""


class NodeNotFoundError(DialogueError, KeyError):
    def __init__(self, node_id: str):
        super().__init__(f"Node not found: {node_id}")
        self.node_id = node_id

    def __str__(self) -> str:
        return self.args[0]


class EdgeNotFoundError(DialogueError, KeyError):
    def __init__(self, edge_id: str):
        super().__init__(f"Edge not found: {edge_id}")
        self.edge_id = edge_id

    def __str__(self) -> str:
        return self.args[0]
