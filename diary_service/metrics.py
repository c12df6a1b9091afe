from prometheus_client import Counter

WORKOUTS_CREATED_TOTAL = Counter(
    "diary_workouts_created_total",
    "Number of workouts created in diary-service",
)

SETS_LOGGED_TOTAL = Counter(
    "diary_sets_logged_total",
    "Number of sets written in diary-service",
    ["source"],  # workout | exercise | single
)

EXERCISES_CREATED_TOTAL = Counter(
    "diary_exercises_created_total",
    "Number of user exercises added to the catalog",
)

ACTION_RESULTS_TOTAL = Counter(
    "diary_action_results_total",
    "Outcomes of write actions",
    ["action", "status"],
)

DASHBOARD_CACHE_HITS_TOTAL = Counter(
    "diary_dashboard_cache_hits_total",
    "Number of Redis cache hits for dashboard data",
)

DASHBOARD_CACHE_MISSES_TOTAL = Counter(
    "diary_dashboard_cache_misses_total",
    "Number of Redis cache misses for dashboard data",
)

DASHBOARD_CACHE_ERRORS_TOTAL = Counter(
    "diary_dashboard_cache_errors_total",
    "Number of Redis cache errors for dashboard data",
)
