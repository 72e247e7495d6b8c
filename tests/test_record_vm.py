from app.viewmodels.record_vm import RecordVM
from app.viewmodels.tab_vm import TabVM
from core.models import Advice, Baby, User


def test_advice_labels(advices):
    vm = RecordVM(advices[0])

    assert vm.title == "Bonjour bébé"
    assert vm.category_label == "Sommeil"
    assert vm.targeting_label == "Jour 200"
    assert vm.status_label == "Actif"
    assert vm.stats_label == "2 vues · 0 j'aime · 0 je n'aime pas"


def test_missing_values_render_as_placeholders():
    vm = RecordVM(Advice(id="x"))

    assert vm.category_label == "N/A"
    assert vm.targeting_label == "-"
    assert vm.created_label == "-"
    assert vm.title == "-"


def test_unresolved_category_has_no_name(advices):
    assert RecordVM(advices[3]).category_label == "N/A"


def test_user_title_is_full_name():
    assert RecordVM(User(id="u", name="Claire", lastname="Dupont")).title == "Claire Dupont"


def test_generic_text():
    vm = RecordVM(Baby(id="b", autorisation=False, weight=7.5))

    assert vm.text("autorisation") == "Non"
    assert vm.text("weight") == "7.5"
    assert vm.text("allergy") == "-"


def test_tab_caption():
    assert TabVM("6-9", "6 - 9 mois (180 - 270 j)", 4).caption == "6 - 9 mois (180 - 270 j) (4)"
