from datetime import date, datetime

from pagecal_core.date_change import DateChangeController


def test_initial_date_defaults_to_today():
    assert DateChangeController().current_date == date.today()
    assert DateChangeController(datetime(2021, 5, 13, 8)).current_date == date(2021, 5, 13)


def test_animate_to_date_notifies_listeners():
    controller = DateChangeController(date(2021, 5, 13))
    seen = []
    controller.add_listener(seen.append)
    controller.add_listener(seen.append)  # added once only
    controller.animate_to_date(datetime(2022, 1, 2, 10))
    assert seen == [date(2022, 1, 2)]
    assert controller.current_date == date(2022, 1, 2)


def test_listener_may_remove_itself():
    controller = DateChangeController()
    seen = []

    def once(d):
        seen.append(d)
        controller.remove_listener(once)

    controller.add_listener(once)
    controller.animate_to_date(date(2021, 1, 1))
    controller.animate_to_date(date(2021, 2, 1))
    assert seen == [date(2021, 1, 1)]
    assert controller.listener_count == 0
