from .chefs import Chef
from .dishes import Dish, DishIngredientLine
from .ingredients import Ingredient

__all__ = ["Chef", "Dish", "DishIngredientLine", "Ingredient"]
