"""
``repositories`` file of a saved image: image name -> tag -> top layer id.
"""

from dataclasses import dataclass, field
from typing import Dict, IO, Iterator, Optional, Union

from glimage.errors import SchemaInvalid
from glimage.helper import jsontree
from glimage.image.schemas import repositories as repositoriesSchema


@dataclass(frozen=True)
class Repository:
    tags: Dict[str, str] = field(default_factory=dict)

    def __getitem__(self, tag: str) -> str:
        return self.tags[tag]

    def __iter__(self) -> Iterator[str]:
        return iter(self.tags)

    def __len__(self):
        return len(self.tags)

    def get(self, tag: str) -> Optional[str]:
        return self.tags.get(tag)


@dataclass(frozen=True)
class Repositories:
    repositories: Dict[str, Repository] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Repository:
        return self.repositories[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.repositories)

    def __len__(self):
        return len(self.repositories)

    def __contains__(self, name) -> bool:
        return name in self.repositories

    def layer_for(self, name: str, tag: str) -> Optional[str]:
        repository = self.repositories.get(name)
        return None if repository is None else repository.get(tag)

    @classmethod
    def from_tree(cls, tree: jsontree.JsonTree) -> "Repositories":
        jsontree.validate(tree, repositoriesSchema, SchemaInvalid)
        return cls({name: Repository(dict(tags)) for name, tags in tree.items()})

    @classmethod
    def from_str(cls, s: str) -> "Repositories":
        return cls.from_tree(jsontree.from_str(s))

    @classmethod
    def from_bytes(cls, v: bytes) -> "Repositories":
        return cls.from_tree(jsontree.from_bytes(v))

    @classmethod
    def from_file(cls, path: Union[str, IO]) -> "Repositories":
        return cls.from_tree(jsontree.from_file(path))

    def to_tree(self) -> dict:
        return {name: dict(repo.tags) for name, repo in self.repositories.items()}

    def to_json(self, indent=None) -> str:
        return jsontree.dumps(self.to_tree(), indent=indent)
