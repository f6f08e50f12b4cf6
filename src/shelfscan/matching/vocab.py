"""Default vocabulary tables shared by the matching layer and the fallback detector."""

from __future__ import annotations

BRAND_ALIASES: dict[str, list[str]] = {
    "coca cola": ["coke", "coca-cola", "cocacola"],
    "pepsi": ["pepsi cola"],
}

PRODUCE_ALIASES: dict[str, list[str]] = {
    "orange": ["oranges", "citrus"],
    "apple": ["apples"],
    "banana": ["bananas"],
    "carrot": ["carrots"],
    "broccoli": ["broccoli"],
    "tomato": ["tomatoes"],
}

PRODUCE_QUERY_KEYWORDS: list[str] = [
    "apple", "banana", "orange", "grape", "strawberry", "watermelon", "pineapple",
    "mango", "pear", "peach", "plum", "cherry", "kiwi", "lemon", "lime",
    "carrot", "broccoli", "tomato", "potato", "onion", "pepper", "lettuce",
    "cucumber", "celery", "spinach", "cabbage", "corn", "peas", "beans",
    "fruit", "vegetable", "veggie", "produce", "fresh",
]

# Living things never stocked on a shelf.
DISALLOWED_CLASSES: list[str] = [
    "person",
    "dog",
    "cat",
    "bird",
    "horse",
    "sheep",
    "cow",
    "elephant",
    "bear",
    "zebra",
    "giraffe",
]

PRODUCE_CLASS_BOOSTS: dict[str, float] = {
    "banana": 1.15,
    "apple": 1.15,
    "sandwich": 1.15,
    "orange": 1.15,
    "broccoli": 1.15,
    "carrot": 1.15,
    "pizza": 1.15,
    "cake": 1.15,
    "donut": 1.15,
    "hot dog": 1.15,
}

# The object detector finds containers but cannot read their labels.
CONTAINER_CLASS_BOOSTS: dict[str, float] = {
    "bottle": 1.0,
    "cup": 1.0,
    "bowl": 1.0,
    "wine glass": 1.0,
    "fork": 1.0,
    "knife": 1.0,
    "spoon": 1.0,
}

PRIORITY_CLASS_BOOSTS: dict[str, float] = {**PRODUCE_CLASS_BOOSTS, **CONTAINER_CLASS_BOOSTS}
