from data_designer.plugins.plugin import Plugin, PluginType

trust_score_plugin = Plugin(
    config_qualified_name="data_designer_trust_score.config.TrustScoreColumnConfig",
    impl_qualified_name="data_designer_trust_score.generator.TrustScoreColumnGenerator",
    plugin_type=PluginType.COLUMN_GENERATOR,
)
