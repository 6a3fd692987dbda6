"""Category catalogue used by forms, pages and the categories route.

Listings store category and subcategory ids; display names are resolved
here and fall back to the raw id for anything unknown.
"""

CATEGORIES = [
    {
        'id': 'electronics',
        'name': 'Электроника',
        'icon': 'fa-solid fa-mobile-screen',
        'subcategories': [
            {'id': 'phones', 'name': 'Телефоны'},
            {'id': 'computers', 'name': 'Компьютеры и ноутбуки'},
            {'id': 'tv_audio', 'name': 'ТВ и аудио'},
            {'id': 'photo', 'name': 'Фото и видео'},
            {'id': 'accessories', 'name': 'Аксессуары'},
        ],
    },
    {
        'id': 'transport',
        'name': 'Транспорт',
        'icon': 'fa-solid fa-car',
        'subcategories': [
            {'id': 'cars', 'name': 'Легковые автомобили'},
            {'id': 'motorcycles', 'name': 'Мотоциклы'},
            {'id': 'bicycles', 'name': 'Велосипеды'},
            {'id': 'parts', 'name': 'Запчасти'},
        ],
    },
    {
        'id': 'real_estate',
        'name': 'Недвижимость',
        'icon': 'fa-solid fa-house',
        'subcategories': [
            {'id': 'apartments', 'name': 'Квартиры'},
            {'id': 'houses', 'name': 'Дома'},
            {'id': 'rooms', 'name': 'Комнаты'},
            {'id': 'commercial', 'name': 'Коммерческая недвижимость'},
        ],
    },
    {
        'id': 'home',
        'name': 'Дом и сад',
        'icon': 'fa-solid fa-couch',
        'subcategories': [
            {'id': 'furniture', 'name': 'Мебель'},
            {'id': 'appliances', 'name': 'Бытовая техника'},
            {'id': 'garden', 'name': 'Сад и огород'},
            {'id': 'repair', 'name': 'Ремонт и строительство'},
        ],
    },
    {
        'id': 'fashion',
        'name': 'Одежда и обувь',
        'icon': 'fa-solid fa-shirt',
        'subcategories': [
            {'id': 'women', 'name': 'Женская одежда'},
            {'id': 'men', 'name': 'Мужская одежда'},
            {'id': 'shoes', 'name': 'Обувь'},
        ],
    },
    {
        'id': 'kids',
        'name': 'Детский мир',
        'icon': 'fa-solid fa-baby',
        'subcategories': [
            {'id': 'toys', 'name': 'Игрушки'},
            {'id': 'kids_clothes', 'name': 'Детская одежда'},
            {'id': 'strollers', 'name': 'Коляски'},
        ],
    },
    {
        'id': 'hobby',
        'name': 'Хобби и отдых',
        'icon': 'fa-solid fa-guitar',
        'subcategories': [
            {'id': 'sport', 'name': 'Спорт'},
            {'id': 'music', 'name': 'Музыкальные инструменты'},
            {'id': 'books', 'name': 'Книги'},
        ],
    },
    {
        'id': 'animals',
        'name': 'Животные',
        'icon': 'fa-solid fa-paw',
        'subcategories': [
            {'id': 'pets', 'name': 'Домашние питомцы'},
            {'id': 'pet_goods', 'name': 'Товары для животных'},
        ],
    },
    {
        'id': 'services',
        'name': 'Услуги',
        'icon': 'fa-solid fa-screwdriver-wrench',
        'subcategories': [
            {'id': 'repair_services', 'name': 'Ремонт'},
            {'id': 'lessons', 'name': 'Обучение'},
            {'id': 'delivery', 'name': 'Доставка'},
        ],
    },
    {
        'id': 'other',
        'name': 'Разное',
        'icon': 'fa-solid fa-box-open',
        'subcategories': [
            {'id': 'misc', 'name': 'Прочее'},
        ],
    },
]

_CATEGORIES_BY_ID = {category['id']: category for category in CATEGORIES}


def get_category(category_id):
    """Return the category dict for an id, or None."""
    return _CATEGORIES_BY_ID.get(category_id)


def get_category_name(category_id):
    category = get_category(category_id)
    return category['name'] if category else category_id


def get_subcategory_name(category_id, subcategory_id):
    category = get_category(category_id)
    if category:
        for subcategory in category['subcategories']:
            if subcategory['id'] == subcategory_id:
                return subcategory['name']
    return subcategory_id


def validate_category(category_id, subcategory_id=None):
    """Check that a category (and optional subcategory) exists.

    Returns:
        bool: True when the ids are known.
    """
    category = get_category(category_id)
    if not category:
        return False
    if not subcategory_id:
        return True
    return any(sub['id'] == subcategory_id for sub in category['subcategories'])
