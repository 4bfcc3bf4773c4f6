from atsched.events.core import ETA_UPDATED, FLIGHT_LANDED, OPERATION_REJECTED, EventBus
from atsched.orchestrator.scheduler import AirTrafficScheduler
from atsched.scheduling.flight import FlightState


def _three_on_one_runway():
	s = AirTrafficScheduler()
	assert s.initialize(1) == ["1 Runways are now available"]
	assert s.submit_flight(1, 1, 0, 5, 10) == ["Flight 1 scheduled - ETA: 10"]
	assert s.submit_flight(2, 1, 0, 5, 10) == ["Flight 2 scheduled - ETA: 20"]
	assert s.submit_flight(3, 1, 0, 5, 10) == ["Flight 3 scheduled - ETA: 30"]
	return s


def test_single_runway_scenario():
	s = _three_on_one_runway()
	assert s.tick(10) == ["Flight 1 has landed at time 10"]
	assert s.flight(2).state == FlightState.IN_PROGRESS
	assert s.flight(2).eta == 20
	assert s.flight(3).eta == 30
	assert s.print_active() == [
		"[flight2, airline1, runway1, start10, ETA20]",
		"[flight3, airline1, runway1, start20, ETA30]",
	]


def test_states_after_submission():
	s = _three_on_one_runway()
	assert s.flight(1).state == FlightState.IN_PROGRESS
	assert s.flight(2).state == FlightState.SCHEDULED
	assert (s.flight(2).start_time, s.flight(2).runway_id) == (10, 1)
	assert s.flight(3).start_time == 20


def test_priority_reorders_and_reports_updated_etas():
	s = AirTrafficScheduler()
	s.initialize(1)
	assert s.submit_flight(1, 1, 0, 1, 10) == ["Flight 1 scheduled - ETA: 10"]
	assert s.submit_flight(2, 1, 0, 1, 5) == ["Flight 2 scheduled - ETA: 15"]
	assert s.submit_flight(3, 2, 1, 5, 4) == ["Flight 3 scheduled - ETA: 14", "Updated ETAs: [2: 19]"]
	assert s.reprioritize(2, 2, 9) == [
		"Priority of Flight 2 has been updated to 9",
		"Updated ETAs: [2: 15, 3: 19]",
	]
	assert s.cancel_flight(2, 3) == ["Flight 2 has been canceled", "Updated ETAs: [3: 14]"]
	assert s.flight(2) is None
	assert s.tick(10) == ["Flight 1 has landed at time 10"]
	assert s.flight(3).state == FlightState.IN_PROGRESS
	assert s.tick(14) == ["Flight 3 has landed at time 14"]
	assert s.print_active() == ["No active flights"]


def test_cancel_and_reprioritize_errors():
	s = AirTrafficScheduler()
	s.initialize(1)
	s.submit_flight(1, 1, 0, 1, 10)
	assert s.cancel_flight(99, 4) == ["Flight 99 does not exist"]
	assert s.cancel_flight(1, 4) == ["Cannot cancel. Flight 1 has already departed"]
	assert s.reprioritize(99, 4, 3) == ["Flight 99 not found"]
	assert s.reprioritize(1, 4, 3) == ["Cannot reprioritize. Flight 1 has already departed"]
	assert s.flight(1).priority == 1
	assert s.current_time == 4
	rejected = s.bus.of_type(OPERATION_REJECTED)
	assert [e.payload["operation"] for e in rejected] == ["CancelFlight", "CancelFlight", "Reprioritize", "Reprioritize"]


def test_lookup_errors_still_report_landings():
	s = _three_on_one_runway()
	assert s.cancel_flight(1, 10) == [
		"Flight 1 has landed at time 10",
		"Flight 1 does not exist",
	]


def test_add_runways_pulls_flights_forward():
	s = _three_on_one_runway()
	assert s.add_runways(1, 5) == [
		"Additional 1 Runways are now available",
		"Updated ETAs: [2: 15, 3: 20]",
	]
	assert s.runway_ids() == [1, 2]
	assert (s.flight(2).runway_id, s.flight(2).start_time) == (2, 5)
	assert s.flight(2).state == FlightState.IN_PROGRESS
	assert (s.flight(3).runway_id, s.flight(3).start_time) == (1, 10)


def test_runway_ids_are_never_reused():
	s = AirTrafficScheduler()
	s.initialize(2)
	s.add_runways(3, 0)
	s.initialize(1)
	assert s.runway_ids() == [1, 2, 3, 4, 5, 6]


def test_ground_hold_removes_only_unsatisfied_flights():
	s = AirTrafficScheduler()
	s.initialize(1)
	s.submit_flight(1, 1, 0, 1, 10)
	s.submit_flight(2, 2, 0, 1, 10)
	s.submit_flight(3, 3, 0, 1, 10)
	assert s.submit_flight(4, 2, 0, 1, 10) == ["Flight 4 scheduled - ETA: 40"]
	assert s.ground_hold(2, 2, 1) == [
		"Flights of the airlines in the range [2, 2] have been grounded",
		"Updated ETAs: [3: 20]",
	]
	assert s.ground_hold(1, 1, 2) == ["Flights of the airlines in the range [1, 1] have been grounded"]
	assert [f.flight_id for f in s.active_flights()] == [1, 3]
	assert 2 not in s.airline_index


def test_print_schedule_lists_future_flights_by_eta():
	s = _three_on_one_runway()
	assert s.print_schedule(0, 100) == ["[2]", "[3]"]
	assert s.print_schedule(25, 30) == ["[3]"]
	assert s.print_schedule(31, 40) == ["There are no flights in that time period"]


def test_read_only_operations_do_not_advance_time():
	s = _three_on_one_runway()
	s.print_active()
	s.print_schedule(0, 1000)
	assert s.current_time == 0
	assert len(s.active) == 3


def test_tick_lands_everything_up_to_time_in_order():
	s = _three_on_one_runway()
	assert s.tick(25) == ["Flight 1 has landed at time 10", "Flight 2 has landed at time 20"]
	assert s.flight(3).state == FlightState.IN_PROGRESS
	landed = s.bus.of_type(FLIGHT_LANDED)
	assert [(e.payload["flight_id"], e.time) for e in landed] == [(1, 10), (2, 20)]


def test_simultaneous_landings_sorted_by_id():
	s = AirTrafficScheduler()
	s.initialize(2)
	s.submit_flight(8, 1, 0, 1, 10)
	s.submit_flight(3, 1, 0, 1, 10)
	assert s.tick(12) == ["Flight 3 has landed at time 10", "Flight 8 has landed at time 10"]


def test_tick_backwards_is_a_no_op():
	s = _three_on_one_runway()
	s.tick(25)
	assert s.tick(5) == []
	assert s.current_time == 25
	assert s.flight(3).eta == 30


def test_validation_errors_leave_time_untouched():
	s = _three_on_one_runway()
	assert s.initialize(0) == ["Invalid input. Please provide a valid number of runways."]
	assert s.add_runways(0, 50) == ["Invalid input. Please provide a valid number of runways."]
	assert s.add_runways(-2, 50) == ["Invalid input. Please provide a valid number of runways."]
	assert s.ground_hold(5, 3, 50) == ["Invalid input. Please provide a valid airline range."]
	assert s.submit_flight(1, 1, 50, 1, 1) == ["Duplicate FlightID"]
	assert s.current_time == 0
	assert len(s.active) == 3
	assert s.runway_ids() == [1]


def test_flight_id_can_be_reused_after_landing():
	s = _three_on_one_runway()
	s.tick(10)
	assert s.submit_flight(1, 4, 11, 1, 2) == ["Flight 1 scheduled - ETA: 32"]


def test_flights_wait_without_runways():
	s = AirTrafficScheduler()
	assert s.submit_flight(1, 1, 0, 5, 10) == ["Flight 1 scheduled - ETA: -1"]
	s.submit_flight(2, 1, 0, 1, 4)
	f = s.flight(1)
	assert f.state == FlightState.PENDING
	assert f.heap_node is not None
	assert len(s.pending) == 2
	assert s.reprioritize(2, 0, 7) == ["Priority of Flight 2 has been updated to 7"]
	assert s.initialize(1) == ["1 Runways are now available"]
	assert (s.flight(2).start_time, s.flight(2).eta) == (0, 4)
	assert (s.flight(1).start_time, s.flight(1).eta) == (4, 14)
	assert s.pending.is_empty()


def test_cancel_pending_flight_removes_it_from_pending_heap():
	s = AirTrafficScheduler()
	s.submit_flight(1, 1, 0, 5, 10)
	s.submit_flight(2, 1, 0, 5, 10)
	assert s.cancel_flight(1, 0) == ["Flight 1 has been canceled"]
	assert len(s.pending) == 1
	assert s.pending.find_max().flight_id == 2


def test_eta_update_events_carry_old_and_new_eta():
	s = AirTrafficScheduler()
	s.initialize(1)
	s.submit_flight(1, 1, 0, 1, 10)
	s.submit_flight(2, 1, 0, 1, 5)
	s.submit_flight(3, 2, 1, 5, 4)
	updates = s.bus.of_type(ETA_UPDATED)
	assert [(e.payload["flight_id"], e.payload["old_eta"], e.payload["eta"]) for e in updates] == [(2, 15, 19)]


def test_subscriber_receives_landings_in_order():
	bus = EventBus()
	seen = []
	bus.subscribe(FLIGHT_LANDED, seen.append)
	s = AirTrafficScheduler(bus)
	s.initialize(2)
	s.submit_flight(1, 1, 0, 1, 2)
	s.submit_flight(2, 3, 0, 1, 5)
	s.submit_flight(3, 1, 0, 1, 1)
	assert seen == []
	s.tick(10)
	assert [(e.payload["flight_id"], e.time) for e in seen] == [(1, 2), (3, 3), (2, 5)]
	assert all(e.type == FLIGHT_LANDED for e in seen)
	assert seen == bus.of_type(FLIGHT_LANDED)


def test_zero_duration_flight_lands_at_its_start():
	s = AirTrafficScheduler()
	s.initialize(1)
	assert s.submit_flight(1, 1, 0, 5, 0) == ["Flight 1 scheduled - ETA: 0"]
	assert s.flight(1) in s.timetable
	assert s.submit_flight(2, 1, 0, 5, 3) == [
		"Flight 1 has landed at time 0",
		"Flight 2 scheduled - ETA: 3",
	]
	assert (s.flight(2).runway_id, s.flight(2).start_time) == (1, 0)
	assert s.tick(3) == ["Flight 2 has landed at time 3"]


def test_active_flights_is_a_fresh_sorted_list():
	s = _three_on_one_runway()
	listed = s.active_flights()
	listed.clear()
	assert [f.flight_id for f in s.active_flights()] == [1, 2, 3]
	assert s.active_flights()[1] is s.flight(2)
