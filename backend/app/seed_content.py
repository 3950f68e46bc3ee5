DEPARTMENT_NAMES = [
    "Commercial",
    "Customer Success",
    "Finance, Legal & Transformation",
    "Managed Services",
    "People",
    "Sales",
    "Technology",
    "Academy",
    "Professional Services",
]

# One template per age and gender for ages 1-16.
_GIFTS_BY_AGE = {
    1: (
        ["Soft toys", "Baby books", "Building blocks", "Musical toys"],
        ["Soft dolls", "Baby books", "Building blocks", "Musical toys"],
    ),
    2: (
        ["Toy cars", "Building blocks", "Picture books", "Activity toys"],
        ["Soft dolls", "Building blocks", "Picture books", "Activity toys"],
    ),
    3: (
        ["Action figures", "Toy cars", "Building blocks", "Puzzles"],
        ["Dolls", "Soft toys", "Building blocks", "Puzzles"],
    ),
    4: (
        ["Action figures", "Toy cars", "Building blocks", "Picture books"],
        ["Dolls", "Soft toys", "Picture books", "Tea sets"],
    ),
    5: (
        ["Dinosaur toys", "Puzzles", "Toy trains", "Storybooks"],
        ["Teddy bears", "Colouring books", "Puzzles", "Dress-up clothes"],
    ),
    6: (
        ["Action figures", "Toy cars", "Building blocks", "Board games"],
        ["Dolls", "Art supplies", "Storybooks", "Musical toys"],
    ),
    7: (
        ["LEGO sets", "Board games", "Sports equipment", "Books"],
        ["Dolls", "Art supplies", "Storybooks", "Craft kits"],
    ),
    8: (
        ["LEGO sets", "Video games", "Sports gear", "Science kits"],
        ["Craft kits", "Musical instruments", "Jewellery", "Books"],
    ),
    9: (
        ["Sports gear", "Puzzles", "Educational toys", "Board games"],
        ["Art supplies", "Books", "Science kits", "Craft kits"],
    ),
    10: (
        ["LEGO sets", "Board games", "Science kits", "Books"],
        ["Books", "Art supplies", "Jewellery", "Sports equipment"],
    ),
    11: (
        ["Video games", "Sports equipment", "Books", "Tech gadgets"],
        ["Books", "Art supplies", "Science kits", "Musical instruments"],
    ),
    12: (
        ["Sports equipment", "Video games", "Books", "Hobby kits"],
        ["Books", "Art supplies", "Tech gadgets", "Jewellery"],
    ),
    13: (
        ["Tech gadgets", "Books", "Hobby kits", "Sports equipment"],
        ["Books", "Art supplies", "Tech gadgets", "Fashion accessories"],
    ),
    14: (
        ["Tech gadgets", "Sports equipment", "Books", "Gaming accessories"],
        ["Books", "Tech gadgets", "Art supplies", "Fashion accessories"],
    ),
    15: (
        ["Tech gadgets", "Books", "Sports equipment", "Music equipment"],
        ["Tech gadgets", "Books", "Fashion accessories", "Art supplies"],
    ),
    16: (
        ["Tech gadgets", "Books", "Sports equipment", "Gaming gear"],
        ["Tech gadgets", "Books", "Fashion accessories", "Art supplies"],
    ),
}

GIFT_IDEA_TEMPLATES = [
    {"age": age, "gender": gender, "category": None, "gift_ideas": ideas}
    for age, (male, female) in _GIFTS_BY_AGE.items()
    for gender, ideas in (("male", male), ("female", female))
]

BOYS_NAMES = [
    "Oliver", "George", "Harry", "Jack", "Noah", "Charlie", "Oscar", "Henry",
    "Leo", "Alfie", "Muhammad", "Aarav", "Zayn", "Yusuf", "Jakub", "Filip",
    "Emmanuel", "Samuel", "Kwame", "Kofi", "Wei", "Kenji", "Karim", "Bilal",
]

GIRLS_NAMES = [
    "Olivia", "Amelia", "Isla", "Ava", "Mia", "Grace", "Lily", "Emily",
    "Poppy", "Ruby", "Aisha", "Zara", "Fatima", "Priya", "Zofia", "Maja",
    "Naomi", "Amara", "Imani", "Mei", "Hana", "Yasmin", "Leila", "Farah",
]
