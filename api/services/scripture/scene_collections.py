# api/services/scripture/scene_collections.py
"""
Curated scripture collections.

Each collection walks through a run of biblical scenes in order ("Walk with
Jesus" from the Nativity to the Ascension, say). A scene names its passages
in API form; the text is fetched on demand through the scripture service.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

FEATURED_COUNT = 4


class CollectionCategory(Enum):
    JESUS_LIFE = "jesus_life"
    MIRACLES = "miracles"
    HEROES = "heroes"
    EARLY_WORLD = "early_world"
    PARABLES = "parables"
    PSALMS = "psalms"

    @property
    def display_name(self) -> str:
        return _CATEGORY_NAMES[self]


_CATEGORY_NAMES = {
    CollectionCategory.JESUS_LIFE: "Walk with Jesus",
    CollectionCategory.MIRACLES: "Jesus' Miracles",
    CollectionCategory.HEROES: "Faith Heroes",
    CollectionCategory.EARLY_WORLD: "Early World",
    CollectionCategory.PARABLES: "Parables",
    CollectionCategory.PSALMS: "Psalms",
}


@dataclass(frozen=True)
class BibleScene:
    """
    One scene of a collection.

    Attributes:
        id: Slug, unique within its collection ("last-supper")
        title: Display title
        description: One-line summary, used as the reading subtitle
        references: Passages in API form ("LUK.22.19")
        image_prompt: Subject for generated artwork
        order: Position within the collection, from 1
    """
    id: str
    title: str
    description: str
    references: tuple
    image_prompt: str
    order: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "references": list(self.references),
            "image_prompt": self.image_prompt,
            "order": self.order,
        }


@dataclass(frozen=True)
class BibleCollection:
    id: str
    title: str
    subtitle: str
    description: str
    color: str
    category: CollectionCategory
    scenes: tuple = field(default_factory=tuple)

    def scene(self, scene_id: str) -> Optional[BibleScene]:
        for scene in self.scenes:
            if scene.id == scene_id:
                return scene
        return None

    def to_dict(self, include_scenes: bool = True) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "color": self.color,
            "category": self.category.value,
            "category_name": self.category.display_name,
            "scene_count": len(self.scenes),
        }
        if include_scenes:
            data["scenes"] = [s.to_dict() for s in self.scenes]
        return data


def _scenes(*rows) -> tuple:
    return tuple(
        BibleScene(id=sid, title=title, description=description,
                   references=tuple(refs), image_prompt=prompt, order=i)
        for i, (sid, title, description, refs, prompt) in enumerate(rows, start=1)
    )


COLLECTIONS = (
    BibleCollection(
        id="walk-with-jesus",
        title="Walk with Jesus",
        subtitle="Follow Christ's earthly journey",
        description="Experience the life of Jesus from His birth to His ascension, walking "
                    "alongside our Lord through His most important moments on earth.",
        color="#F59E0B",
        category=CollectionCategory.JESUS_LIFE,
        scenes=_scenes(
            ("birth", "The Birth of Jesus", "The miraculous birth of our Savior in Bethlehem",
             ["LUK.2.7", "LUK.2.10"],
             "nativity scene with Mary, Joseph, and baby Jesus in a stable"),
            ("baptism", "Baptism by John", "Jesus begins His public ministry",
             ["MAT.3.16", "MAT.3.17"],
             "Jesus being baptized by John the Baptist in the Jordan River"),
            ("temptation", "The Temptation", "Jesus overcomes temptation in the wilderness",
             ["MAT.4.1", "MAT.4.4"],
             "Jesus praying in the wilderness, resisting temptation"),
            ("calling", "Calling the Disciples", "Jesus calls His first followers",
             ["MAT.4.19"],
             "Jesus calling fishermen to follow Him by the Sea of Galilee"),
            ("sermon-on-the-mount", "The Sermon on the Mount",
             "Jesus teaches the Beatitudes and perfect way of life",
             ["MAT.5.3"],
             "Jesus teaching a crowd on a mountainside"),
            ("last-supper", "The Last Supper", "Jesus institutes the Eucharist",
             ["LUK.22.19"],
             "Jesus with His disciples at the Last Supper"),
            ("crucifixion", "The Crucifixion", "Jesus sacrifices Himself for our salvation",
             ["JHN.19.30"],
             "Jesus on the cross at Calvary"),
            ("resurrection", "The Resurrection", "Jesus rises from the dead on Easter morning",
             ["MAT.28.5-6"],
             "Jesus rising from the tomb in glory"),
            ("great-commission", "The Great Commission", "Jesus sends forth His disciples",
             ["MAT.28.19"],
             "Jesus appearing to His disciples and commissioning them"),
            ("ascension", "The Ascension", "Jesus ascends to Heaven",
             ["ACT.1.9"],
             "Jesus ascending into heaven before His disciples"),
        ),
    ),
    BibleCollection(
        id="miracles",
        title="Jesus' Miracles",
        subtitle="Witness divine power",
        description="Experience the miraculous works of Jesus that demonstrated His divine "
                    "nature and compassion for humanity.",
        color="#06B6D4",
        category=CollectionCategory.MIRACLES,
        scenes=_scenes(
            ("water-into-wine", "Water into Wine", "Jesus' first miracle at Cana",
             ["JHN.2.3", "JHN.2.7"],
             "Jesus at the wedding feast of Cana, water jars nearby"),
            ("feeding-5000", "Feeding the 5000", "Jesus multiplies loaves and fishes",
             ["MAT.14.20"],
             "Jesus blessing bread and fish before a large crowd"),
            ("walking-on-water", "Walking on Water", "Jesus walks across the Sea of Galilee",
             ["MAT.14.25"],
             "Jesus walking on water towards the disciples' boat"),
            ("healing-the-blind", "Healing the Blind", "Jesus restores sight to the blind",
             ["JHN.9.6-7"],
             "Jesus healing a blind man with His hands"),
            ("raising-lazarus", "Raising Lazarus", "Jesus brings Lazarus back to life",
             ["JHN.11.25"],
             "Jesus calling Lazarus forth from the tomb"),
        ),
    ),
    BibleCollection(
        id="faith-heroes",
        title="Faith Heroes",
        subtitle="Learn from biblical courage",
        description="Discover the stories of men and women who showed extraordinary faith "
                    "and courage in following God's will.",
        color="#DC2626",
        category=CollectionCategory.HEROES,
        scenes=_scenes(
            ("abraham", "Abraham's Faith", "The father of faith obeys God's call",
             ["GEN.12.1"],
             "Abraham looking up at the stars, receiving God's promise"),
            ("moses", "Moses and the Exodus", "Leading God's people to freedom",
             ["EXO.14.21"],
             "Moses parting the Red Sea with his staff raised"),
            ("david", "David vs Goliath", "Young David defeats the giant",
             ["1SA.17.45"],
             "Young David facing the giant Goliath with his sling"),
            ("daniel", "Daniel in the Lions' Den", "Faith protects in the face of danger",
             ["DAN.6.22"],
             "Daniel praying peacefully among lions"),
            ("esther", "Esther's Courage", "A queen saves her people",
             ["EST.4.14"],
             "Queen Esther approaching the king's throne courageously"),
        ),
    ),
    BibleCollection(
        id="early-world",
        title="Early World",
        subtitle="The beginning of all things",
        description="Journey through the earliest stories of creation, fall, and God's "
                    "covenant with humanity.",
        color="#92400E",
        category=CollectionCategory.EARLY_WORLD,
        scenes=_scenes(
            ("creation", "The Creation", "God creates the heavens and earth",
             ["GEN.1.1"],
             "God creating light, separating light from darkness"),
            ("adam-and-eve", "Adam and Eve", "The first humans in Paradise",
             ["GEN.1.27"],
             "Adam and Eve in the Garden of Eden"),
            ("noahs-ark", "Noah's Ark", "Salvation through the great flood",
             ["GEN.9.12-13"],
             "Noah's ark on the waters during the great flood"),
            ("tower-of-babel", "Tower of Babel", "Human pride and God's response",
             ["GEN.11.4"],
             "The Tower of Babel reaching toward heaven"),
        ),
    ),
)


class CollectionsDirectory:
    """
    Lookup over the curated collections.

    Usage:
        collections = CollectionsDirectory()
        walk = collections.get("walk-with-jesus")
        scene = walk.scene("last-supper")
    """

    def __init__(self, collections: tuple = COLLECTIONS):
        self._collections = tuple(collections)
        logger.info(f"Loaded {len(self._collections)} scripture collections")

    def all_collections(self) -> list[BibleCollection]:
        return list(self._collections)

    def featured(self, count: int = FEATURED_COUNT) -> list[BibleCollection]:
        """The first collections in display order, shown on the home screen."""
        return list(self._collections[:count])

    def get(self, collection_id: str) -> Optional[BibleCollection]:
        for collection in self._collections:
            if collection.id == collection_id:
                return collection
        return None

    def by_category(self, category: CollectionCategory) -> list[BibleCollection]:
        return [c for c in self._collections if c.category == category]

    def find_scene(self, collection_id: str, scene_id: str) -> Optional[BibleScene]:
        collection = self.get(collection_id)
        return collection.scene(scene_id) if collection else None
