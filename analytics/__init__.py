from .common import safe_ratio, sample_series
from .contribution import (
    kpi_summary,
    to_brand_performance,
    to_channel_contribution,
    to_consumer_vs_retail_promo,
    to_copy_length_performance,
    to_daypart_prime_ratio,
    to_format_performance,
    to_market_performance,
    to_publisher_bench,
    to_roi_vs_spend,
    to_vtr_viewability_impact,
)
from .digital import (
    to_buying_type_analysis,
    to_campaign_setup_learnings,
    to_funnel_stage_budget,
    to_targeting_impact,
    to_video_vs_static,
    to_vtr_viewability_scatter,
)
from .filters import Selection, filter_records
from .flighting import (
    flight_timing_recommendations,
    to_budget_scenarios,
    to_competitive_flight_analysis,
    to_flight_pattern_timeseries,
    to_flighting_scenarios,
)
from .halo import (
    optimal_timing_recommendations,
    to_brand_halo,
    to_channel_synergy_matrix,
    to_cross_channel_lift,
    to_media_sync_table,
    to_portfolio_correlation,
    to_temporal_synergy,
)
from .mmm import (
    to_channel_attribution,
    to_incremental_impact,
    to_media_contribution_decomposition,
    to_media_efficiency_frontier,
    to_saturation_curve,
    to_short_vs_long_term,
)
from .optimize import (
    to_budget_allocation_scenarios,
    to_channel_saturation_analysis,
    to_media_mix_optimization,
    to_roi_vs_reach_optimization,
)
from .publishers import (
    to_creative_format_by_publisher,
    to_cross_country_publisher,
    to_publisher_roi_vs_scale,
    to_publisher_share_growth,
    to_publisher_winning_tactics,
)
from .seasonal import (
    build_seasonal_what_if,
    to_channel_split_season,
    to_day_of_week_performance,
    to_hour_bucket_performance,
    to_season_buckets,
)
from .targeting import (
    to_audience_segment_matrix,
    to_first_party_performance,
    to_funnel_budget_allocation,
    to_funnel_conversion_flow,
    to_reach_frequency_by_funnel,
    to_targeting_vs_bau,
)
from .timeseries import (
    to_digital_channel_timeseries,
    to_funnel_stage_timeseries,
    to_publisher_performance_timeseries,
    to_time_aggregation,
    to_timeseries,
    to_timeseries_weekly,
    to_tv_vs_ctv_timeseries,
    to_weekly_performance,
)
from .tv import (
    to_daypart_performance_table,
    to_linear_vs_ctv_scatter,
    to_prime_vs_non_prime,
    to_reach_frequency_optimization,
    to_video_platform_breakdown,
)
