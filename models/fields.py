"""
Field names of the remote storefront base, one class per table.

Table names themselves live in config so a base can be renamed per deployment;
field names are part of the data contract and are fixed.
"""


class CustomerFields:
    NAME = "name"
    EMAIL = "email"
    PHONE = "phone"
    PASSWORD = "password"
    CART_PRODUCTS = "корзина"
    CART_QUANTITIES = "колво товаров"
    CART_TOTAL = "итоговая цена"
    ORDERS = "заказ"


class EmployeeFields:
    NAME = "имя"
    EMAIL = "почта"
    PASSWORD = "пароль"
    STATUS = "статус"
    ORDERS = "заказ"


class ProductFields:
    NAME = "Название товара"
    DESCRIPTION = "Описание товара"
    PRICE = "цена"
    CATEGORY = "Категория"
    RATING = "оценка товара"
    PHOTO = "Фото"
    DISCOUNT = "скидка"
    BARCODE = "штрихкод"
    STOCK = "кол-во"
    WEIGHT = "вес"
    WEIGHT_STATUS = "статус по весу"
    WEIGHT_PER_PIECE = "вес на шт"


class OrderFields:
    NUMBER = "номер заказа"
    CUSTOMER = "Table 1"
    PRODUCTS = "составляющие"
    QUANTITIES = "колво товаров"
    TOTAL = "сумма заказа"
    DELIVERY_TIME = "время на доставку"
    STATUS = "статус"
    ADDRESS = "адрес"
    CREATED_AT = "дата заказа"
    EMPLOYEES = "работники"


class ReviewFields:
    EMAIL = "почта"
    PRODUCT = "товар"
    RATING = "оценка"
    TEXT = "текст отзыва"


class NotificationFields:
    TEXT = "текст уведомления"
    ICON = "иконка"
    CUSTOMER = "Table 1"
    SENT_AT = "время отправления"


class BannerFields:
    NAME = "Название"
    IMAGE = "Плашка"


class FeedbackFields:
    TOPIC = "тема обращения"
    TEXT = "текст"
    ERROR_TEXT = "текст ошибки"
