# Indices / constants used across modules (keep plain floats and ints for JIT friendliness)

# node_f columns (float)
NODE_SERVICE  = 0
NODE_TW_OPEN  = 1
NODE_TW_CLOSE = 2
NODE_SETUP    = 3 # one-time preparation overhead on the first visit to a location
F_NODE_F      = 4 # 4 features

# arrival-time sentinels, no clock meaning
TIME_TOUR_START = -1.0
TIME_TOUR_END   = -2.0
TIME_UNDEFINED  = -3.0

# returned as cost when an activity can never be conducted within its window
INFEASIBLE_COST = float("inf")

# activity kinds
KIND_START    = "start"
KIND_END      = "end"
KIND_SERVICE  = "service"
KIND_PICKUP   = "pickup"
KIND_DELIVERY = "delivery"
TERMINAL_KINDS = frozenset((KIND_START, KIND_END))
ACTIVITY_KINDS = frozenset((KIND_START, KIND_END, KIND_SERVICE, KIND_PICKUP, KIND_DELIVERY))
